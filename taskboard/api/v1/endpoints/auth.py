"""Auth API: sign up, log in, log out, current user.

Sessions live in the auth service; the API hands the access token back to
the browser, which sends it as a bearer token on later requests.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from taskboard.api.v1.dependencies import get_client, get_current_user
from taskboard.application.dtos.user import UserIdentity
from taskboard.infrastructure.supabase import DatabaseClient
from taskboard.schemas.auth import (
    CredentialsRequest,
    SignUpResponse,
    TokenResponse,
    UserResponse,
)

router = APIRouter()


@router.post("/signup", response_model=SignUpResponse, status_code=201)
async def sign_up(
    body: CredentialsRequest,
    client: Annotated[DatabaseClient, Depends(get_client)],
) -> SignUpResponse:
    """Register with email and password. Returns a token when no confirmation is pending."""
    user = await client.auth.sign_up(body.email, body.password)
    return SignUpResponse(
        user=UserResponse.model_validate(user),
        access_token=client.auth.access_token,
    )


@router.post("/login", response_model=TokenResponse)
async def login(
    body: CredentialsRequest,
    client: Annotated[DatabaseClient, Depends(get_client)],
) -> TokenResponse:
    """Exchange email and password for an access token."""
    session = await client.auth.sign_in_with_password(body.email, body.password)
    return TokenResponse(
        access_token=session.access_token,
        user=UserResponse.model_validate(session.user),
    )


@router.post("/logout", status_code=204)
async def logout(
    _: Annotated[UserIdentity, Depends(get_current_user)],
    client: Annotated[DatabaseClient, Depends(get_client)],
) -> Response:
    """Revoke the current access token."""
    await client.auth.sign_out()
    return Response(status_code=204)


@router.get("/me", response_model=UserResponse)
def me(user: Annotated[UserIdentity, Depends(get_current_user)]) -> UserResponse:
    """Return the signed-in identity."""
    return UserResponse.model_validate(user)
