import asyncio
from datetime import timedelta

import pytest
from sqlmodel import select

from kitchen_iam.api.utils.jwt import issue_access_token, issue_refresh_token, new_token_id
from kitchen_iam.app.use_cases.auth import AuthenticateRequestUseCase, RefreshTokenUseCase
from kitchen_iam.domain.base import utcnow
from kitchen_iam.domain.entities import RotationOutcome, Session


async def _create_session(session_factory, user, expires_in=timedelta(days=7)):
    token_id = new_token_id()
    now = utcnow()
    session = Session(
        user_id=user.id,
        current_refresh_token_id=token_id,
        expires_at=now + expires_in,
    )
    async with session_factory() as db:
        db.add(session)
        await db.commit()
    refresh_token, _ = issue_refresh_token(user.id, session.id, token_id)
    return session, refresh_token


@pytest.mark.asyncio
async def test_rotation_compare_and_swap(seed_user, session_factory, uow_factory):
    user, _ = await seed_user("branch_admin")
    session, _ = await _create_session(session_factory, user)
    original = session.current_refresh_token_id

    async with uow_factory() as uow:
        outcome = await uow.sessions.rotate_refresh_token_id(session.id, original, "next-id", utcnow())
        await uow.commit()
    assert outcome == RotationOutcome.rotated

    async with uow_factory() as uow:
        outcome = await uow.sessions.rotate_refresh_token_id(session.id, original, "other-id", utcnow())
        await uow.commit()
    assert outcome == RotationOutcome.reuse_detected

    async with uow_factory() as uow:
        assert await uow.sessions.get_by_id(session.id) is None
        outcome = await uow.sessions.rotate_refresh_token_id(session.id, "next-id", "x", utcnow())
    assert outcome == RotationOutcome.not_found


@pytest.mark.asyncio
async def test_concurrent_refresh_exactly_one_succeeds(seed_user, session_factory, uow_factory):
    user, _ = await seed_user("branch_admin")
    _, refresh_token = await _create_session(session_factory, user)

    results = await asyncio.gather(
        RefreshTokenUseCase(uow_factory()).execute(refresh_token),
        RefreshTokenUseCase(uow_factory()).execute(refresh_token),
    )

    assert sum(1 for r in results if r.is_ok()) == 1
    failures = [r.error.code for r in results if r.is_err()]
    assert failures == ["REUSE_DETECTED"]


@pytest.mark.asyncio
async def test_expired_session_is_deleted_on_refresh(seed_user, session_factory, uow_factory, db_session):
    user, _ = await seed_user("branch_admin")
    session, refresh_token = await _create_session(
        session_factory, user, expires_in=timedelta(seconds=-1)
    )

    result = await RefreshTokenUseCase(uow_factory()).execute(refresh_token)

    assert result.error.code == "SESSION_EXPIRED"
    rows = (await db_session.exec(select(Session).where(Session.id == session.id))).all()
    assert rows == []


@pytest.mark.asyncio
async def test_authenticate_touches_session(seed_user, session_factory, uow_factory, db_session):
    user, _ = await seed_user("branch_admin")
    session, _ = await _create_session(session_factory, user)
    before = session.last_activity_at

    result = await AuthenticateRequestUseCase(uow_factory()).execute(
        issue_access_token(user, session.id)
    )

    assert result.is_ok()
    assert result.value.id == user.id
    stored = (await db_session.exec(select(Session).where(Session.id == session.id))).one()
    assert stored.last_activity_at >= before
