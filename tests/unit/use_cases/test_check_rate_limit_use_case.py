import asyncio
from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from kitchen_iam.app.use_cases.rate_limit import (
    CheckRateLimitUseCase,
    RateLimitConfig,
    get_rate_limit_config,
)
from kitchen_iam.config import ApplicationConfig
from kitchen_iam.domain.entities import Role

CONFIG = RateLimitConfig(endpoint_class="api_write", requests=50, window_seconds=60)


@pytest.mark.asyncio
async def test_window_alignment(mock_uow):
    mock_uow.rate_limits.increment.return_value = (True, 1)

    result = await CheckRateLimitUseCase(lambda: mock_uow).execute(
        "user:abc", CONFIG, now=datetime(2026, 10, 16, 12, 0, 42)
    )

    decision = result.value
    assert decision.window_start == datetime(2026, 10, 16, 12, 0, 0)
    assert decision.reset_time == datetime(2026, 10, 16, 12, 1, 0)
    assert decision.remaining == 49
    identity, endpoint_class, window_start, expires_at, limit, _ = (
        mock_uow.rate_limits.increment.call_args.args
    )
    assert (identity, endpoint_class, limit) == ("user:abc", "api_write", 50)
    assert expires_at == decision.reset_time
    mock_uow.rate_limits.delete_expired.assert_called_once()
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_denied_when_full(mock_uow):
    mock_uow.rate_limits.increment.return_value = (False, 50)

    result = await CheckRateLimitUseCase(lambda: mock_uow).execute("user:abc", CONFIG)

    assert result.value.allowed is False
    assert result.value.remaining == 0
    assert result.value.total_requests == 50


@pytest.mark.asyncio
async def test_store_failure_fails_open(mock_uow):
    mock_uow.rate_limits.increment.side_effect = OperationalError("UPSERT", {}, Exception("down"))

    result = await CheckRateLimitUseCase(lambda: mock_uow).execute("user:abc", CONFIG)

    assert result.is_ok()
    assert result.value.allowed is True
    assert result.value.remaining == 49
    assert result.value.total_requests == 1
    mock_uow.close.assert_called_once()


@pytest.mark.asyncio
async def test_unsupported_dialect_fails_open(mock_uow):
    mock_uow.rate_limits.increment.side_effect = NotImplementedError(
        "No rate limit upsert for dialect 'mysql'"
    )

    result = await CheckRateLimitUseCase(lambda: mock_uow).execute("ip:192.0.2.1", CONFIG)

    assert result.value.allowed is True
    mock_uow.close.assert_called_once()


@pytest.mark.asyncio
async def test_each_count_uses_its_own_unit_of_work(mock_uow):
    mock_uow.rate_limits.increment.return_value = (True, 1)
    created = []

    def factory():
        created.append(mock_uow)
        return mock_uow

    use_case = CheckRateLimitUseCase(factory)
    await use_case.execute("user:abc", CONFIG)
    await use_case.execute("user:abc", CONFIG)

    assert len(created) == 2
    assert mock_uow.close.call_count == 2


@pytest.mark.asyncio
async def test_cancelled_request_still_records_hit(mock_uow):
    started = asyncio.Event()
    release = asyncio.Event()

    async def slow_increment(*args):
        started.set()
        await release.wait()
        return True, 1

    mock_uow.rate_limits.increment.side_effect = slow_increment
    request = asyncio.create_task(
        CheckRateLimitUseCase(lambda: mock_uow).execute("user:abc", CONFIG)
    )
    await started.wait()

    request.cancel()
    with pytest.raises(asyncio.CancelledError):
        await request
    release.set()
    for _ in range(10):
        if mock_uow.close.called:
            break
        await asyncio.sleep(0)

    mock_uow.commit.assert_called_once()
    mock_uow.close.assert_called_once()

def test_default_limits():
    assert get_rate_limit_config("login").requests == 5
    assert get_rate_limit_config("login").window_seconds == 900
    assert get_rate_limit_config("export").window_seconds == 300


def test_unknown_class_falls_back_to_api_read():
    config = get_rate_limit_config("nonexistent")
    assert config.endpoint_class == "api_read"
    assert config.requests == 100


def test_super_admin_gets_admin_variant():
    assert get_rate_limit_config("api_write", Role.SUPER_ADMIN).endpoint_class == "admin_write"
    assert get_rate_limit_config("api_write", Role.BRANCH_ADMIN).endpoint_class == "api_write"
    assert get_rate_limit_config("login", Role.SUPER_ADMIN).endpoint_class == "login"


def test_config_overrides(monkeypatch):
    monkeypatch.setattr(ApplicationConfig, "RATE_LIMITS", {"login": {"requests": 2}})

    config = get_rate_limit_config("login")

    assert config.requests == 2
    assert config.window_seconds == 900
