from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.dialects import postgresql

from backoffice.core.context import reset_current_organization_id, set_current_organization_id
from backoffice.core.db import apply_rls_organization_context, get_db_session
from backoffice.core.repositories import (
    OrganizationContextMissingError,
    OrganizationRepository,
    ProjectRepository,
    UserRepository,
)
from backoffice.models.project import Project
from backoffice.models.user import User


def test_organization_id_missing_raises() -> None:
    repo = OrganizationRepository(session=Mock(), model=Project)

    with pytest.raises(OrganizationContextMissingError):
        _ = repo.organization_id


def test_scoped_select_contains_organization_filter() -> None:
    token = set_current_organization_id(42)
    try:
        repo = ProjectRepository(session=Mock())
        stmt = repo._scoped_select()
        sql = str(stmt.compile(dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True}))

        assert "WHERE" in sql
        assert "projects.organization_id = 42" in sql
    finally:
        reset_current_organization_id(token)


@pytest.mark.asyncio
async def test_apply_rls_organization_context_executes_sql() -> None:
    session = Mock()
    session.execute = AsyncMock()

    await apply_rls_organization_context(session, 42)

    session.execute.assert_awaited_once()
    assert session.execute.await_args.args[1] == {"organization_id": "42"}


@pytest.mark.asyncio
async def test_get_db_session_yields_session(monkeypatch: pytest.MonkeyPatch) -> None:
    sentinel = object()

    class _Ctx:
        async def __aenter__(self):
            return sentinel

        async def __aexit__(self, exc_type, exc, tb):  # noqa: ANN001
            return None

    from backoffice.core import db

    monkeypatch.setattr(db, "AsyncSessionLocal", lambda: _Ctx())

    agen = get_db_session()
    value = await agen.__anext__()
    assert value is sentinel

    with pytest.raises(StopAsyncIteration):
        await agen.__anext__()


@pytest.mark.asyncio
async def test_create_forces_current_organization() -> None:
    token = set_current_organization_id(42)
    try:
        session = Mock()
        session.add = Mock()
        session.flush = AsyncMock()
        session.refresh = AsyncMock()

        repo = ProjectRepository(session)
        repo._apply_rls = AsyncMock()

        created = await repo.create(name="Ramadan campaign", organization_id=7)

        assert created.organization_id == 42
        session.add.assert_called_once_with(created)
        session.flush.assert_awaited_once()
        session.refresh.assert_awaited_once_with(created)
    finally:
        reset_current_organization_id(token)


@pytest.mark.asyncio
async def test_apply_rls_follows_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from backoffice.core.repositories import base

    token = set_current_organization_id(42)
    try:
        session = Mock()
        session.execute = AsyncMock()
        repo = ProjectRepository(session)

        monkeypatch.setattr(base.settings, "tenant_rls_enabled", False)
        await repo._apply_rls()
        session.execute.assert_not_awaited()

        monkeypatch.setattr(base.settings, "tenant_rls_enabled", True)
        await repo._apply_rls()
        session.execute.assert_awaited_once()
    finally:
        reset_current_organization_id(token)


@pytest.mark.asyncio
async def test_list_returns_newest_first_within_organization() -> None:
    token = set_current_organization_id(42)
    try:
        newest = Project(id=9, organization_id=42, name="Teaser", status="planning")
        session = Mock()
        session.execute = AsyncMock(
            return_value=SimpleNamespace(scalars=lambda: SimpleNamespace(all=lambda: [newest]))
        )

        repo = ProjectRepository(session)
        repo._apply_rls = AsyncMock()

        listed = await repo.list(limit=10, offset=20)

        assert listed == [newest]
        repo._apply_rls.assert_awaited_once()
        stmt = session.execute.await_args.args[0]
        sql = str(stmt.compile(dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True}))
        assert "projects.organization_id = 42" in sql
        assert "ORDER BY projects.created_at DESC, projects.id DESC" in sql
        assert "LIMIT 10 OFFSET 20" in sql
    finally:
        reset_current_organization_id(token)

@pytest.mark.asyncio
async def test_user_repository_get_by_email() -> None:
    token = set_current_organization_id(42)
    try:
        expected = User(id=1, organization_id=42, email="zineb@nomedia.ma", name="Zineb", role="manager")
        session = Mock()
        session.execute = AsyncMock(return_value=SimpleNamespace(scalar_one_or_none=lambda: expected))

        repo = UserRepository(session)
        repo._apply_rls = AsyncMock()

        assert await repo.get_by_email("zineb@nomedia.ma") is expected
        assert isinstance(repo, OrganizationRepository)
    finally:
        reset_current_organization_id(token)
