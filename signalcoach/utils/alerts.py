from __future__ import annotations
"""
Violation Types and Constants

Defines integrity violation kinds, suspicion levels, default event messages
and the coaching badge buckets.
"""

from enum import Enum


class ViolationType(str, Enum):
    """Kinds of integrity violations."""
    TAB_SWITCH = "tab_switch"
    LOOKING_AWAY = "looking_away"
    PHONE_DETECTED = "phone_detected"
    PERSON_MISSING = "person_missing"


class SuspicionLevel(str, Enum):
    """Cumulative suspicion classification for a session."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CoachingStatus(str, Enum):
    """Badge bucket for a 0-100 coaching score."""
    GOOD = "good"
    WARNING = "warning"
    BAD = "bad"


# Cumulative violation totals at which suspicion escalates
SUSPICION_MEDIUM_AT = 5
SUSPICION_HIGH_AT = 10

# Default event messages, keyed by the trigger that produced the event
VIOLATION_MESSAGES = {
    "tab_hidden": "User switched away from interview tab",
    "window_blur": "Interview window lost focus",
    "looking_away": "User looked away for {seconds}s",
    "person_missing": "No person detected in camera view",
    "phone_heuristic": "Possible phone detected near face",
    "phone_reported": "Phone or device detected in camera view",
}


def get_violation_message(trigger: str, **values) -> str:
    """
    Get the event message for a violation trigger.
    
    Args:
        trigger: Key into VIOLATION_MESSAGES
        **values: Placeholder values for templated messages
        
    Returns:
        Message string
    """
    template = VIOLATION_MESSAGES.get(trigger)
    if template is None:
        return "Interview integrity issue detected"
    return template.format(**values)


def get_suspicion_level(total_violations: int) -> SuspicionLevel:
    """
    Classify suspicion from the cumulative violation total.
    
    Args:
        total_violations: Violations recorded since the last reset
        
    Returns:
        SuspicionLevel
    """
    if total_violations >= SUSPICION_HIGH_AT:
        return SuspicionLevel.HIGH
    elif total_violations >= SUSPICION_MEDIUM_AT:
        return SuspicionLevel.MEDIUM
    else:
        return SuspicionLevel.LOW


def get_coaching_status(score: float) -> CoachingStatus:
    """Bucket a 0-100 score into a coaching badge."""
    if score >= 80:
        return CoachingStatus.GOOD
    elif score >= 60:
        return CoachingStatus.WARNING
    return CoachingStatus.BAD
