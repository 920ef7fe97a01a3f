from __future__ import annotations
"""
FastAPI Server for the Signal Engine

Exposes session control, browser signals (tab visibility / window focus),
pushed pose frames and the published metrics.
"""

from contextlib import asynccontextmanager
from typing import Literal, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from signalcoach.cfg import Settings, get_settings
from signalcoach.data.providers import MediaPipePoseProvider, PoseProvider, ProviderUnavailableError
from signalcoach.engine.landmarks import PoseFrame
from signalcoach.service.session import CoachingSession
from signalcoach.utils import get_logger

logger = get_logger(__name__)

# Track active sessions
active_sessions: dict[str, CoachingSession] = {}


def default_provider_factory(settings: Settings) -> PoseProvider:
    """Local camera provider built from settings."""
    return MediaPipePoseProvider(settings.to_camera_config())


class StartSessionRequest(BaseModel):
    """Request to start a coaching session."""
    session_id: Optional[str] = None
    source: Literal["camera", "remote"] = "remote"
    eye_contact_threshold: Optional[float] = None
    look_away_duration_ms: Optional[float] = None


class SessionResponse(BaseModel):
    """Response for session control requests."""
    success: bool
    session_id: str
    message: str


class LandmarkModel(BaseModel):
    """One landmark as sent by a browser pose model."""
    x: float
    y: float
    z: float = 0.0
    visibility: Optional[float] = None


class FrameRequest(BaseModel):
    """A pushed pose frame; an empty landmark list means no person in view."""
    landmarks: list[Optional[LandmarkModel]] = []
    hand_near_face: Optional[bool] = None
    person_detected: Optional[bool] = None


class VisibilityRequest(BaseModel):
    visible: bool


class FocusRequest(BaseModel):
    focused: bool


class StatusResponse(BaseModel):
    """Status response."""
    active_sessions: list[str]
    total_sessions: int


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("🚀 Signal engine API starting...")
    yield
    # Release every camera on shutdown
    logger.info("👋 Shutting down, stopping all sessions...")
    for session_id, session in list(active_sessions.items()):
        try:
            await session.stop()
        except Exception as e:
            logger.error(f"Error stopping session {session_id}: {e}")
    active_sessions.clear()


app = FastAPI(
    title="Signalcoach",
    description="Real-time body-language coaching and interview integrity signals",
    version="0.1.0",
    lifespan=lifespan,
)
app.state.provider_factory = default_provider_factory


def _get_session(session_id: str) -> CoachingSession:
    session = active_sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
    return session


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "active_sessions": len(active_sessions)}


@app.get("/status", response_model=StatusResponse)
async def get_status():
    """Get current service status."""
    return StatusResponse(
        active_sessions=list(active_sessions.keys()),
        total_sessions=len(active_sessions),
    )


@app.post("/sessions", response_model=SessionResponse)
async def start_session(request: StartSessionRequest):
    """
    Start a coaching session.
    
    ``camera`` sessions acquire the local camera; ``remote`` sessions
    receive frames through ``POST /sessions/{id}/frames``.
    """
    if request.session_id and request.session_id in active_sessions:
        return SessionResponse(
            success=True,
            session_id=request.session_id,
            message="Session already running",
        )
    
    settings = get_settings()
    overrides = {
        key: value
        for key, value in (
            ("eye_contact_threshold", request.eye_contact_threshold),
            ("look_away_duration_ms", request.look_away_duration_ms),
        )
        if value is not None
    }
    detection_config = settings.to_detection_config().model_copy(update=overrides)
    
    provider = app.state.provider_factory(settings) if request.source == "camera" else None
    session = CoachingSession(
        session_id=request.session_id,
        provider=provider,
        analysis_config=settings.to_analysis_config(),
        detection_config=detection_config,
    )
    
    try:
        await session.start()
    except ProviderUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    
    active_sessions[session.session_id] = session
    logger.info(f"✅ Started session {session.session_id} ({session.source})")
    
    return SessionResponse(
        success=True,
        session_id=session.session_id,
        message="Session started",
    )


@app.post("/sessions/{session_id}/stop", response_model=SessionResponse)
async def stop_session(session_id: str):
    """Stop a session and release its camera."""
    session = active_sessions.pop(session_id, None)
    if session is None:
        return SessionResponse(success=True, session_id=session_id, message="Session not running")
    
    await session.stop()
    logger.info(f"👋 Stopped session {session_id}")
    return SessionResponse(success=True, session_id=session_id, message="Session stopped")


@app.post("/sessions/{session_id}/reset", response_model=SessionResponse)
async def reset_session(session_id: str):
    """Reset scores, counters and events without stopping acquisition."""
    _get_session(session_id).reset()
    return SessionResponse(success=True, session_id=session_id, message="Session reset")


@app.post("/sessions/{session_id}/frames")
async def push_frame(session_id: str, request: FrameRequest):
    """Process one pose frame pushed by the client."""
    session = _get_session(session_id)
    if session.source == "camera":
        # Camera sessions own their frame stream
        raise HTTPException(status_code=409, detail=f"Session {session_id} reads frames from the local camera")
    frame = (
        PoseFrame.from_landmarks(
            lm.model_dump() if lm is not None else None for lm in request.landmarks
        )
        if request.landmarks
        else None
    )
    metrics = session.push_frame(
        frame,
        hand_near_face=request.hand_near_face,
        person_detected=request.person_detected,
    )
    return metrics.to_dict()


@app.post("/sessions/{session_id}/visibility")
async def visibility_changed(session_id: str, request: VisibilityRequest):
    """Browser document visibility changed."""
    event = _get_session(session_id).on_visibility_change(request.visible)
    return {"event": event.to_dict() if event else None}


@app.post("/sessions/{session_id}/focus")
async def focus_changed(session_id: str, request: FocusRequest):
    """Browser window focus changed."""
    event = _get_session(session_id).on_focus_change(request.focused)
    return {"event": event.to_dict() if event else None}


@app.post("/sessions/{session_id}/phone")
async def report_phone(session_id: str):
    """Upstream phone detection, bypassing the hand heuristic."""
    event = _get_session(session_id).report_phone_detected()
    return {"event": event.to_dict() if event else None}


@app.delete("/sessions/{session_id}/phone")
async def clear_phone(session_id: str):
    """Clear the phone-detected flag."""
    _get_session(session_id).clear_phone_detection()
    return {"cleared": True}


@app.get("/sessions/{session_id}/metrics")
async def get_metrics(session_id: str):
    """Current published snapshots."""
    session = _get_session(session_id)
    return {
        "session_id": session_id,
        "running": session.running,
        "body_language": session.body_metrics.to_dict(),
        "integrity": session.cheating_metrics.to_dict(),
    }


@app.get("/sessions/{session_id}/summary")
async def get_summary(session_id: str):
    """Session summary for persistence."""
    return _get_session(session_id).summary().to_dict()


def start_server(host: Optional[str] = None, port: Optional[int] = None):
    """Start the FastAPI server."""
    import uvicorn
    
    settings = get_settings()
    uvicorn.run(
        "signalcoach.api.server:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=False,
    )


if __name__ == "__main__":
    start_server()
