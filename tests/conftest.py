import pytest

from kitchen_iam.config import ApplicationConfig


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Cheapest bcrypt cost so hashing does not dominate test time"""
    monkeypatch.setattr(ApplicationConfig, "BCRYPT_ROUNDS", 4)
