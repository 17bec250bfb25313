"""
Rate limit classes and their defaults.
"""

from typing import Dict, Optional

from kitchen_iam.config import ApplicationConfig
from kitchen_iam.domain.entities import Role
from .dtos import RateLimitConfig

DEFAULT_RATE_LIMITS: Dict[str, RateLimitConfig] = {
    "login": RateLimitConfig(endpoint_class="login", requests=5, window_seconds=15 * 60),
    "refresh": RateLimitConfig(endpoint_class="refresh", requests=10, window_seconds=5 * 60),
    "api_read": RateLimitConfig(endpoint_class="api_read", requests=100, window_seconds=60),
    "api_write": RateLimitConfig(endpoint_class="api_write", requests=50, window_seconds=60),
    "api_delete": RateLimitConfig(endpoint_class="api_delete", requests=20, window_seconds=60),
    "admin_read": RateLimitConfig(endpoint_class="admin_read", requests=300, window_seconds=60),
    "admin_write": RateLimitConfig(endpoint_class="admin_write", requests=150, window_seconds=60),
    "admin_delete": RateLimitConfig(endpoint_class="admin_delete", requests=50, window_seconds=60),
    "analytics": RateLimitConfig(endpoint_class="analytics", requests=30, window_seconds=60),
    "export": RateLimitConfig(endpoint_class="export", requests=5, window_seconds=5 * 60),
}


def rate_limit_table() -> Dict[str, RateLimitConfig]:
    """Defaults merged with RATE_LIMITS overrides from configuration"""
    table = dict(DEFAULT_RATE_LIMITS)
    for endpoint_class, override in (ApplicationConfig.RATE_LIMITS or {}).items():
        base = table.get(endpoint_class)
        table[endpoint_class] = RateLimitConfig(
            endpoint_class=endpoint_class,
            requests=int(override.get("requests", base.requests if base else 100)),
            window_seconds=int(override.get("window_seconds", base.window_seconds if base else 60)),
        )
    return table


def get_rate_limit_config(endpoint_class: str, role: Optional[Role] = None) -> RateLimitConfig:
    """
    Resolve the limit for an endpoint class.

    SUPER_ADMIN principals get the admin_ variant when one exists, so
    api_write resolves to admin_write. Unknown classes fall back to api_read.
    """
    table = rate_limit_table()

    if role is not None and Role(role) == Role.SUPER_ADMIN:
        short_name = endpoint_class[len("api_"):] if endpoint_class.startswith("api_") else endpoint_class
        for candidate in (f"admin_{endpoint_class}", f"admin_{short_name}"):
            if candidate in table:
                return table[candidate]

    return table.get(endpoint_class) or table["api_read"]
