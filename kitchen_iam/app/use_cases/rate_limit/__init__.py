"""
Rate Limiting Use Cases
"""

from .check_rate_limit_use_case import CheckRateLimitUseCase
from .config import DEFAULT_RATE_LIMITS, get_rate_limit_config, rate_limit_table
from .dtos import RateLimitConfig, RateLimitDecision

__all__ = [
    "CheckRateLimitUseCase",
    "RateLimitConfig",
    "RateLimitDecision",
    "DEFAULT_RATE_LIMITS",
    "get_rate_limit_config",
    "rate_limit_table",
]
