"""
Signalcoach Engine - Results Classes

Published snapshots. Every snapshot is frozen and replaced whole, so a
reader never observes a half-applied update.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional

from signalcoach.engine.motion import HandMovementLevel
from signalcoach.utils.alerts import (
    CoachingStatus,
    SuspicionLevel,
    ViolationType,
    get_coaching_status,
    get_suspicion_level,
)

# Hand-movement badge per level
HAND_STATUS: dict[HandMovementLevel, CoachingStatus] = {
    HandMovementLevel.CALM: CoachingStatus.GOOD,
    HandMovementLevel.MODERATE: CoachingStatus.WARNING,
    HandMovementLevel.NERVOUS: CoachingStatus.BAD,
}


@dataclass(frozen=True)
class BodyLanguageMetrics:
    """
    Body-language snapshot published after every processed frame.
    
    Attributes:
        posture_score: Smoothed posture score (0-100)
        is_slouching_now: Slouch flag of the latest frame
        hand_movement_level: Hand-movement level of the latest frame
        hand_movement_count: Cumulative nervous-movement frames
        eye_contact_score: Eye-contact score of the latest frame (0-100)
        overall_score: Weighted overall score (0-100)
        feedback: Coaching messages, primary advice first
    """
    posture_score: int = 100
    is_slouching_now: bool = False
    hand_movement_level: HandMovementLevel = HandMovementLevel.CALM
    hand_movement_count: int = 0
    eye_contact_score: int = 100
    overall_score: int = 100
    feedback: tuple[str, ...] = ()
    
    @property
    def primary_feedback(self) -> Optional[str]:
        return self.feedback[0] if self.feedback else None
    
    @property
    def posture_status(self) -> CoachingStatus:
        """Posture badge; slouching is always bad regardless of the score."""
        if self.is_slouching_now:
            return CoachingStatus.BAD
        return get_coaching_status(self.posture_score)
    
    @property
    def hand_status(self) -> CoachingStatus:
        return HAND_STATUS[self.hand_movement_level]
    
    def to_dict(self) -> dict:
        return {
            "posture_score": self.posture_score,
            "is_slouching_now": self.is_slouching_now,
            "hand_movement_level": self.hand_movement_level.value,
            "hand_movement_count": self.hand_movement_count,
            "eye_contact_score": self.eye_contact_score,
            "overall_score": self.overall_score,
            "feedback": list(self.feedback),
            "posture_status": self.posture_status.value,
            "hand_status": self.hand_status.value,
        }


def new_event_id() -> str:
    """Process-unique event identifier."""
    return f"evt_{int(time.time() * 1000)}_{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class CheatingEvent:
    """
    A single integrity violation.
    
    Attributes:
        id: Unique identifier
        type: Violation kind
        timestamp: Creation time (UTC)
        duration: Sustained duration in milliseconds, for debounced kinds
        message: Human-readable description
    """
    id: str
    type: ViolationType
    timestamp: datetime
    message: str
    duration: Optional[float] = None
    
    @classmethod
    def create(
        cls,
        violation_type: ViolationType,
        message: str,
        duration: Optional[float] = None,
    ) -> "CheatingEvent":
        """Create an event stamped with a fresh id and the current time."""
        return cls(
            id=new_event_id(),
            type=violation_type,
            timestamp=datetime.now(timezone.utc),
            message=message,
            duration=duration,
        )
    
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "timestamp": self.timestamp.isoformat(),
            "duration": self.duration,
            "message": self.message,
        }


# Per-type counter field on CheatingMetrics
COUNTER_FIELDS: dict[ViolationType, str] = {
    ViolationType.TAB_SWITCH: "tab_switch_count",
    ViolationType.LOOKING_AWAY: "look_away_count",
    ViolationType.PHONE_DETECTED: "phone_detected_count",
    ViolationType.PERSON_MISSING: "person_missing_count",
}

_unmapped = set(ViolationType) - set(COUNTER_FIELDS)
if _unmapped:
    raise RuntimeError(f"ViolationType without a counter field: {sorted(v.value for v in _unmapped)}")


@dataclass(frozen=True)
class CheatingMetrics:
    """
    Integrity snapshot.
    
    ``total_violations`` always equals the sum of the per-type counters;
    ``events`` holds only the most recent events, newest first.
    """
    tab_switch_count: int = 0
    look_away_count: int = 0
    phone_detected_count: int = 0
    person_missing_count: int = 0
    total_violations: int = 0
    
    # Live flags
    is_tab_visible: bool = True
    is_currently_looking_away: bool = False
    is_phone_detected: bool = False
    is_person_missing: bool = False
    
    events: tuple[CheatingEvent, ...] = ()
    suspicion_level: SuspicionLevel = SuspicionLevel.LOW
    
    def count_for(self, violation_type: ViolationType) -> int:
        return getattr(self, COUNTER_FIELDS[violation_type])
    
    def with_event(self, event: CheatingEvent, capacity: int) -> "CheatingMetrics":
        """Return a new snapshot with ``event`` recorded."""
        counter = COUNTER_FIELDS[event.type]
        total = self.total_violations + 1
        return replace(
            self,
            events=((event,) + self.events)[:capacity],
            total_violations=total,
            suspicion_level=get_suspicion_level(total),
            **{counter: getattr(self, counter) + 1},
        )
    
    @property
    def has_active_issues(self) -> bool:
        return (
            not self.is_tab_visible
            or self.is_currently_looking_away
            or self.is_phone_detected
            or self.is_person_missing
        )
    
    def to_dict(self) -> dict:
        return {
            "tab_switch_count": self.tab_switch_count,
            "look_away_count": self.look_away_count,
            "phone_detected_count": self.phone_detected_count,
            "person_missing_count": self.person_missing_count,
            "total_violations": self.total_violations,
            "is_tab_visible": self.is_tab_visible,
            "is_currently_looking_away": self.is_currently_looking_away,
            "is_phone_detected": self.is_phone_detected,
            "is_person_missing": self.is_person_missing,
            "events": [e.to_dict() for e in self.events],
            "suspicion_level": self.suspicion_level.value,
        }


@dataclass
class SessionSummary:
    """
    End-of-session record handed to the persistence layer.
    
    Attributes:
        session_id: Session identifier
        started_at: When acquisition started (UTC)
        ended_at: When the summary was taken (UTC)
        frames_processed: Frames scored since the last reset
        session_score: Combined body-language / attention score (0-100)
    """
    session_id: str
    started_at: Optional[datetime]
    ended_at: datetime
    frames_processed: int
    body: BodyLanguageMetrics
    integrity: CheatingMetrics
    session_score: int
    notes: list[str] = field(default_factory=list)
    
    @property
    def duration_seconds(self) -> float:
        if self.started_at is None:
            return 0.0
        return max(0.0, (self.ended_at - self.started_at).total_seconds())
    
    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat(),
            "duration_seconds": self.duration_seconds,
            "frames_processed": self.frames_processed,
            "posture_score": self.body.posture_score,
            "posture_status": self.body.posture_status.value,
            "hand_status": self.body.hand_status.value,
            "eye_contact_score": self.body.eye_contact_score,
            "overall_score": self.body.overall_score,
            "nervous_movements": self.body.hand_movement_count,
            "tab_switch_count": self.integrity.tab_switch_count,
            "looking_away_count": self.integrity.look_away_count,
            "phone_detected_count": self.integrity.phone_detected_count,
            "person_missing_count": self.integrity.person_missing_count,
            "total_violations": self.integrity.total_violations,
            "suspicion_level": self.integrity.suspicion_level.value,
            "session_score": self.session_score,
            "notes": list(self.notes),
        }
