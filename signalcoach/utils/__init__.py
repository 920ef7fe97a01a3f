from __future__ import annotations
"""
Signalcoach Utilities Module

Logging and violation vocabulary.
"""

from signalcoach.utils.logger import get_logger, setup_logging, ViolationLogger
from signalcoach.utils.alerts import (
    ViolationType,
    SuspicionLevel,
    CoachingStatus,
    get_violation_message,
    get_suspicion_level,
    get_coaching_status,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "ViolationLogger",
    "ViolationType",
    "SuspicionLevel",
    "CoachingStatus",
    "get_violation_message",
    "get_suspicion_level",
    "get_coaching_status",
]
