"""
Signalcoach Service Module

Session lifecycle around the signal engine.
"""

from signalcoach.service.session import CoachingSession

__all__ = [
    "CoachingSession",
]
