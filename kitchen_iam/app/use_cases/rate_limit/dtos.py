"""
Rate Limit DTOs
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class RateLimitConfig(BaseModel):
    """Limit for one endpoint class: requests per fixed window"""

    model_config = ConfigDict(frozen=True)

    endpoint_class: str
    requests: int
    window_seconds: int


class RateLimitDecision(BaseModel):
    """Outcome of counting one request"""

    allowed: bool
    limit: int
    remaining: int
    reset_time: datetime
    total_requests: int
    window_start: datetime
