"""
Maintenance Use Cases
"""

from .cleanup_use_case import CleanupReport, CleanupUseCase

__all__ = ["CleanupUseCase", "CleanupReport"]
