from __future__ import annotations
"""
Coaching Session

Binds a pose provider to a signal engine and owns the session lifecycle.
"""

import asyncio
import time
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from signalcoach.cfg import AnalysisConfig, DetectionConfig
from signalcoach.data.providers import PoseProvider, ProviderUnavailableError
from signalcoach.engine import SignalEngine
from signalcoach.engine.landmarks import PoseFrame
from signalcoach.engine.results import (
    BodyLanguageMetrics,
    CheatingEvent,
    CheatingMetrics,
    SessionSummary,
)
from signalcoach.engine.violations import Clock
from signalcoach.utils import ViolationLogger, get_logger

logger = get_logger(__name__)


class CoachingSession:
    """
    One interview-practice session.
    
    With a provider, ``start()`` acquires the camera and consumes frames on
    the running event loop until ``stop()``. Without one, frames are pushed
    by the caller through ``push_frame()``.
    
    Example:
        >>> async with CoachingSession(provider=MediaPipePoseProvider()) as session:
        ...     await asyncio.sleep(30)
        ...     print(session.body_metrics.feedback)
    """
    
    def __init__(
        self,
        session_id: Optional[str] = None,
        provider: Optional[PoseProvider] = None,
        analysis_config: Optional[AnalysisConfig] = None,
        detection_config: Optional[DetectionConfig] = None,
        on_violation: Optional[Callable[[CheatingEvent], None]] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize session.
        
        Args:
            session_id: Identifier, generated if omitted
            provider: Pose provider; None for pushed frames
            analysis_config: Scoring configuration
            detection_config: Violation detection configuration
            on_violation: Called once per emitted event
            clock: Millisecond clock used for debouncing
        """
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self.provider = provider
        self.on_violation = on_violation
        self.log = ViolationLogger(self.session_id)
        
        self.engine = SignalEngine(
            analysis_config=analysis_config,
            detection_config=detection_config,
            on_violation=self._handle_violation,
            clock=clock,
        )
        
        # State
        self.running = False
        self.started_at: Optional[datetime] = None
        self._task: Optional[asyncio.Task] = None
    
    @property
    def body_metrics(self) -> BodyLanguageMetrics:
        return self.engine.body_metrics
    
    @property
    def cheating_metrics(self) -> CheatingMetrics:
        return self.engine.cheating_metrics
    
    @property
    def source(self) -> str:
        return "remote" if self.provider is None else "camera"
    
    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    
    async def start(self):
        """
        Start analysis.
        
        Raises:
            ProviderUnavailableError: If the provider cannot be opened
        """
        if self.running:
            return
        
        if self.provider is not None:
            try:
                await asyncio.to_thread(self.provider.open)
            except ProviderUnavailableError as e:
                logger.error(f"❌ Pose provider unavailable for session {self.session_id}: {e}")
                raise
            except Exception as e:
                logger.error(f"❌ Pose provider failed to start for session {self.session_id}: {e}")
                raise ProviderUnavailableError(str(e)) from e
        
        self.running = True
        self.started_at = datetime.now(timezone.utc)
        
        if self.provider is not None:
            self._task = asyncio.create_task(self._consume())
        
        self.log.log_session("started", source=self.source)
    
    async def stop(self):
        """Stop analysis and release the provider."""
        was_running = self.running
        self.running = False
        
        task, self._task = self._task, None
        try:
            if task is not None:
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)
        finally:
            if self.provider is not None and was_running:
                await asyncio.to_thread(self.provider.close)
        
        if was_running:
            self.log.log_session("stopped", frames=self.engine.frames_processed)
    
    def reset(self):
        """Zero scores, counters, flags and events; acquisition keeps running."""
        self.engine.reset()
        self.log.log_session("reset")
    
    async def __aenter__(self) -> "CoachingSession":
        await self.start()
        return self
    
    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()
    
    # ------------------------------------------------------------------
    # Frame processing
    # ------------------------------------------------------------------
    
    def push_frame(
        self,
        frame: Optional[PoseFrame],
        hand_near_face: Optional[bool] = None,
        person_detected: Optional[bool] = None,
    ) -> BodyLanguageMetrics:
        """Process a frame delivered by a remote client."""
        if not self.running:
            return self.body_metrics
        return self._process(frame, hand_near_face, person_detected)
    
    def _process(
        self,
        frame: Optional[PoseFrame],
        hand_near_face: Optional[bool] = None,
        person_detected: Optional[bool] = None,
    ) -> BodyLanguageMetrics:
        started = time.perf_counter()
        try:
            self.engine.process_frame(frame, hand_near_face=hand_near_face, person_detected=person_detected)
        except Exception:
            # One bad frame must not halt the stream
            logger.exception(f"❌ Frame processing error in session {self.session_id}")
        finally:
            self.log.log_frame(
                self.engine.frames_processed,
                (time.perf_counter() - started) * 1000,
            )
        return self.body_metrics
    
    async def _consume(self):
        """Consume provider frames until stopped."""
        try:
            async for frame in self.provider.frames():
                if not self.running:
                    break
                self._process(frame)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(f"❌ Pose provider stream failed in session {self.session_id}")
    
    # ------------------------------------------------------------------
    # External signals
    # ------------------------------------------------------------------
    
    def on_visibility_change(self, visible: bool) -> Optional[CheatingEvent]:
        return self.engine.on_visibility_change(visible)
    
    def on_focus_change(self, focused: bool) -> Optional[CheatingEvent]:
        return self.engine.on_focus_change(focused)
    
    def report_phone_detected(self) -> Optional[CheatingEvent]:
        return self.engine.report_phone_detected()
    
    def clear_phone_detection(self):
        self.engine.clear_phone_detection()
    
    def _handle_violation(self, event: CheatingEvent):
        metrics = self.engine.cheating_metrics
        self.log.log_violation(
            event.type.value,
            event.message,
            total=metrics.total_violations,
            suspicion=metrics.suspicion_level.value,
        )
        if self.on_violation is not None:
            self.on_violation(event)
    
    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------
    
    def summary(self, notes: Optional[list[str]] = None) -> SessionSummary:
        """Snapshot of the session for the persistence layer."""
        return SessionSummary(
            session_id=self.session_id,
            started_at=self.started_at,
            ended_at=datetime.now(timezone.utc),
            frames_processed=self.engine.frames_processed,
            body=self.body_metrics,
            integrity=self.cheating_metrics,
            session_score=self.engine.session_score(),
            notes=list(notes or []),
        )
