import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    uow.close = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_username = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.create = AsyncMock()
    uow.users.update = AsyncMock()

    uow.sessions = MagicMock()
    uow.sessions.get_by_id = AsyncMock(return_value=None)
    uow.sessions.create = AsyncMock()
    uow.sessions.touch = AsyncMock()
    uow.sessions.rotate_refresh_token_id = AsyncMock()
    uow.sessions.delete = AsyncMock(return_value=True)
    uow.sessions.delete_all_by_user_id = AsyncMock(return_value=0)
    uow.sessions.delete_expired = AsyncMock(return_value=0)

    uow.login_attempts = MagicMock()
    uow.login_attempts.count_recent_failures = AsyncMock(return_value=0)
    uow.login_attempts.record = AsyncMock()
    uow.login_attempts.clear_failures = AsyncMock(return_value=0)
    uow.login_attempts.delete_older_than = AsyncMock(return_value=0)

    uow.rate_limits = MagicMock()
    uow.rate_limits.increment = AsyncMock()
    uow.rate_limits.delete_expired = AsyncMock(return_value=0)
    uow.rate_limits.reset = AsyncMock(return_value=0)

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()
    return uow
