"""Auth API schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class CredentialsRequest(BaseModel):
    """Request body for signup and login."""

    email: EmailStr = Field(...)
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")


class UserResponse(BaseModel):
    """Signed-in identity."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str | None = None


class SignUpResponse(BaseModel):
    """Response for POST /auth/signup.

    access_token is None when the project requires email confirmation first.
    """

    user: UserResponse
    access_token: str | None = None
    token_type: str = "bearer"


class TokenResponse(BaseModel):
    """Session token response."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse
