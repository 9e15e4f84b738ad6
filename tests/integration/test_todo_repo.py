"""Todo repository behavior against the in-memory backend."""

import pytest

from taskboard.application.dtos.todo import TodoCreate, TodoFilters
from taskboard.domain.exceptions import (
    AuthRequiredException,
    NotFoundOrForbiddenException,
    ValidationException,
)
from taskboard.infrastructure.supabase import InMemoryDatabase
from tests.conftest import UserSession, open_session


async def _seed(session: UserSession, rows: list[dict]) -> None:
    """Insert raw todo rows owned by session's user with explicit timestamps."""
    await session.client.table("todos").insert(
        [{"user_id": session.user.id, **row} for row in rows]
    ).execute()


async def test_create_defaults(alice: UserSession) -> None:
    todo = await alice.todos.create(TodoCreate(title="Buy milk"))
    assert todo.user_id == alice.user.id
    assert todo.completed is False
    assert todo.is_public is True
    assert todo.tags == ()


async def test_create_requires_session(anon: UserSession) -> None:
    with pytest.raises(AuthRequiredException):
        await anon.todos.create(TodoCreate(title="Buy milk"))


async def test_create_normalizes_tags_and_creates_missing(alice: UserSession) -> None:
    todo = await alice.todos.create(
        TodoCreate(title="Ship", tags=["Work", "work", " URGENT ", ""])
    )
    assert todo.tags == ("work", "urgent")
    assert [t.name for t in await alice.tags.list_all()] == ["urgent", "work"]


async def test_visibility_rules(alice: UserSession, bob: UserSession, anon: UserSession) -> None:
    public = await alice.todos.create(TodoCreate(title="Public note"))
    private = await alice.todos.create(TodoCreate(title="Secret", is_public=False))

    def ids(page) -> set[str]:
        return {t.id for t in page.items}

    assert ids(await alice.todos.list_todos(TodoFilters())) == {public.id, private.id}
    assert ids(await bob.todos.list_todos(TodoFilters())) == {public.id}
    assert ids(await anon.todos.list_todos(TodoFilters())) == {public.id}


async def test_only_mine(alice: UserSession, bob: UserSession, anon: UserSession) -> None:
    await alice.todos.create(TodoCreate(title="Alice's"))
    mine = await bob.todos.create(TodoCreate(title="Bob's"))
    page = await bob.todos.list_todos(TodoFilters(only_mine=True))
    assert [t.id for t in page.items] == [mine.id]
    assert page.total == 1

    anonymous = await anon.todos.list_todos(TodoFilters(only_mine=True))
    assert anonymous.items == []
    assert anonymous.total == 0


async def test_search_matches_title_description_and_tags(alice: UserSession) -> None:
    await alice.todos.create(TodoCreate(title="Buy MILK"))
    await alice.todos.create(TodoCreate(title="Errand", description="pick up milk"))
    await alice.todos.create(TodoCreate(title="Groceries", tags=["milk"]))
    await alice.todos.create(TodoCreate(title="Unrelated"))
    page = await alice.todos.list_todos(TodoFilters(search="  Milk "))
    assert sorted(t.title for t in page.items) == ["Buy MILK", "Errand", "Groceries"]
    assert page.total == 3


async def test_search_treats_like_wildcards_literally(alice: UserSession) -> None:
    await alice.todos.create(TodoCreate(title="abc"))
    await alice.todos.create(TodoCreate(title="100% done"))
    await alice.todos.create(TodoCreate(title="snake_case name"))

    async def titles(term: str) -> list[str]:
        page = await alice.todos.list_todos(TodoFilters(search=term))
        return sorted(t.title for t in page.items)

    assert await titles("_") == ["snake_case name"]
    assert await titles("%") == ["100% done"]
    assert await titles("100%d") == []
    assert await titles("0% d") == ["100% done"]


async def test_completed_filter(alice: UserSession) -> None:
    done = await alice.todos.create(TodoCreate(title="done"))
    await alice.todos.toggle_completed(done.id, True)
    await alice.todos.create(TodoCreate(title="open"))
    completed = await alice.todos.list_todos(TodoFilters(completed=True))
    pending = await alice.todos.list_todos(TodoFilters(completed=False))
    either = await alice.todos.list_todos(TodoFilters(completed=None))
    assert [t.title for t in completed.items] == ["done"]
    assert [t.title for t in pending.items] == ["open"]
    assert either.total == 2


async def test_tag_filter_matches_any_tag(alice: UserSession) -> None:
    await alice.todos.create(TodoCreate(title="a", tags=["work"]))
    await alice.todos.create(TodoCreate(title="b", tags=["home"]))
    await alice.todos.create(TodoCreate(title="c", tags=["misc"]))
    page = await alice.todos.list_todos(TodoFilters(tag_names=["WORK", "home"]))
    assert sorted(t.title for t in page.items) == ["a", "b"]


async def test_visibility_applies_before_search(
    alice: UserSession, bob: UserSession
) -> None:
    await alice.todos.create(TodoCreate(title="secret milk", is_public=False))
    page = await bob.todos.list_todos(TodoFilters(search="milk"))
    assert page.items == []
    assert page.total == 0


async def test_newest_first(alice: UserSession) -> None:
    await _seed(
        alice,
        [
            {"title": "old", "created_at": "2024-01-01T00:00:00+00:00"},
            {"title": "new", "created_at": "2024-03-01T00:00:00+00:00"},
            {"title": "mid", "created_at": "2024-02-01T00:00:00+00:00"},
        ],
    )
    page = await alice.todos.list_todos(TodoFilters())
    assert [t.title for t in page.items] == ["new", "mid", "old"]


async def test_pagination_is_consistent(alice: UserSession) -> None:
    await _seed(
        alice,
        [
            # Pairs share a timestamp so ordering relies on the id tiebreak
            {"title": f"todo {i}", "created_at": f"2024-01-{i // 2 + 1:02d}T00:00:00+00:00"}
            for i in range(25)
        ],
    )
    pages = [
        await alice.todos.list_todos(TodoFilters(page=n, page_size=10)) for n in (1, 2, 3, 4)
    ]
    assert [len(p.items) for p in pages] == [10, 10, 5, 0]
    assert all(p.total == 25 and p.total_pages == 3 for p in pages)
    seen = [t.id for p in pages for t in p.items]
    assert len(seen) == len(set(seen)) == 25

    again = await alice.todos.list_todos(TodoFilters(page=2, page_size=10))
    assert [t.id for t in again.items] == [t.id for t in pages[1].items]


async def test_page_size_capped(database: InMemoryDatabase) -> None:
    alice = await open_session(database, "alice@example.com")
    page = await alice.todos.list_todos(TodoFilters(page_size=1000))
    assert page.page_size == 100


@pytest.mark.parametrize("filters", [TodoFilters(page=0), TodoFilters(page_size=0)])
async def test_invalid_paging_rejected(alice: UserSession, filters: TodoFilters) -> None:
    with pytest.raises(ValidationException):
        await alice.todos.list_todos(filters)


async def test_update_creates_new_tags(alice: UserSession) -> None:
    todo = await alice.todos.create(TodoCreate(title="x", tags=["work"]))
    updated = await alice.todos.update(
        todo.id, {"title": "y", "tags": ["Work", "Later"], "is_public": False}
    )
    assert updated.title == "y"
    assert updated.tags == ("work", "later")
    assert updated.is_public is False
    assert [t.name for t in await alice.tags.list_all()] == ["later", "work"]


async def test_update_rejects_unknown_field(alice: UserSession) -> None:
    todo = await alice.todos.create(TodoCreate(title="x"))
    with pytest.raises(ValidationException):
        await alice.todos.update(todo.id, {"priority": "high"})


async def test_update_ignores_protected_fields(alice: UserSession, bob: UserSession) -> None:
    todo = await alice.todos.create(TodoCreate(title="x"))
    updated = await alice.todos.update(todo.id, {"user_id": bob.user.id, "title": "y"})
    assert updated.user_id == alice.user.id


async def test_non_owner_cannot_modify(alice: UserSession, bob: UserSession) -> None:
    todo = await alice.todos.create(TodoCreate(title="Public note"))
    with pytest.raises(NotFoundOrForbiddenException):
        await bob.todos.update(todo.id, {"title": "mine"})
    with pytest.raises(NotFoundOrForbiddenException):
        await bob.todos.toggle_completed(todo.id, True)
    with pytest.raises(NotFoundOrForbiddenException):
        await bob.todos.delete(todo.id)


async def test_rejected_update_creates_no_tags(alice: UserSession, bob: UserSession) -> None:
    todo = await alice.todos.create(TodoCreate(title="Public note"))
    with pytest.raises(NotFoundOrForbiddenException):
        await bob.todos.update(todo.id, {"tags": ["spam"]})
    assert await alice.tags.list_all() == []


@pytest.mark.parametrize("changes", [{"is_public": None}, {"completed": None}, {"completed": "yes"}])
async def test_update_rejects_non_boolean_flags(alice: UserSession, changes: dict) -> None:
    todo = await alice.todos.create(TodoCreate(title="x"))
    await alice.todos.toggle_completed(todo.id, True)
    with pytest.raises(ValidationException):
        await alice.todos.update(todo.id, changes)
    with pytest.raises(ValidationException):
        await alice.todos.toggle_completed(todo.id, None)
    page = await alice.todos.list_todos(TodoFilters())
    assert page.items[0].completed is True
    assert page.items[0].is_public is True


async def test_toggle_completed_and_delete(alice: UserSession) -> None:
    todo = await alice.todos.create(TodoCreate(title="x"))
    assert (await alice.todos.toggle_completed(todo.id, True)).completed is True
    assert (await alice.todos.toggle_completed(todo.id, False)).completed is False
    await alice.todos.delete(todo.id)
    assert (await alice.todos.list_todos(TodoFilters())).total == 0
    with pytest.raises(NotFoundOrForbiddenException):
        await alice.todos.delete(todo.id)


async def test_can_modify(alice: UserSession, bob: UserSession, anon: UserSession) -> None:
    todo = await alice.todos.create(TodoCreate(title="x"))
    assert await alice.todos.can_modify(todo.id) is True
    assert await bob.todos.can_modify(todo.id) is False
    assert await anon.todos.can_modify(todo.id) is False
    assert await alice.todos.can_modify("missing") is False


async def test_can_modify_fails_closed(alice: UserSession, database: InMemoryDatabase) -> None:
    todo = await alice.todos.create(TodoCreate(title="x"))
    del database.tables["todos"]
    assert await alice.todos.can_modify(todo.id) is False


async def test_stats_count_only_own_todos(alice: UserSession, bob: UserSession) -> None:
    first = await alice.todos.create(TodoCreate(title="a"))
    await alice.todos.create(TodoCreate(title="b"))
    await alice.todos.create(TodoCreate(title="c"))
    await alice.todos.toggle_completed(first.id, True)
    await bob.todos.create(TodoCreate(title="bob's"))

    stats = await alice.todos.stats()
    assert (stats.total, stats.completed, stats.pending) == (3, 1, 2)


async def test_stats_requires_session(anon: UserSession) -> None:
    with pytest.raises(AuthRequiredException):
        await anon.todos.stats()


async def test_legacy_schema_without_optional_columns(database: InMemoryDatabase) -> None:
    database.drop_column("todos", "is_public")
    database.drop_column("todos", "tags")
    alice = await open_session(database, "alice@example.com")
    bob = await open_session(database, "bob@example.com")
    anon = await open_session(database)

    todo = await alice.todos.create(TodoCreate(title="Buy milk", is_public=False, tags=["home"]))
    assert todo.tags == ()
    assert todo.is_public is None
    assert await alice.tags.list_all() == []

    assert [t.id for t in (await bob.todos.list_todos(TodoFilters())).items] == [todo.id]
    assert (await anon.todos.list_todos(TodoFilters())).items == []

    # Tag filter and tag search are skipped, not errors
    page = await bob.todos.list_todos(TodoFilters(search="milk", tag_names=["home"]))
    assert page.total == 1
    updated = await alice.todos.update(todo.id, {"tags": ["x"], "is_public": True, "title": "y"})
    assert updated.title == "y"
