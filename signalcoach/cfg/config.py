from __future__ import annotations
"""
Signalcoach Configuration Classes

Pydantic-based configuration with defaults.
Single source of truth for all configuration values.
"""

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


# ============================================================================
# Constants - Single source of truth for default values
# ============================================================================

# Temporal smoothing
DEFAULT_WINDOW_SIZE = 30

# Landmark visibility gates
DEFAULT_POSTURE_VISIBILITY = 0.5
DEFAULT_GAZE_VISIBILITY = 0.7
DEFAULT_PERSON_VISIBILITY = 0.5

# Violation detection
DEFAULT_EYE_CONTACT_THRESHOLD = 40
DEFAULT_LOOK_AWAY_DURATION_MS = 2000
DEFAULT_PERSON_MISSING_DURATION_MS = 3000
DEFAULT_EVENT_LOG_CAPACITY = 50
DEFAULT_HAND_NEAR_FACE_RADIUS = 0.15

# Camera / pose estimation
DEFAULT_DEVICE_INDEX = 0
DEFAULT_FRAME_WIDTH = 640
DEFAULT_FRAME_HEIGHT = 480
DEFAULT_PROCESS_FPS = 30
DEFAULT_MODEL_COMPLEXITY = 1
DEFAULT_DETECTION_CONFIDENCE = 0.5
DEFAULT_TRACKING_CONFIDENCE = 0.5

# API server
DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 8001


# ============================================================================
# Base Configuration
# ============================================================================

class BaseConfig(BaseModel):
    """Base configuration class for all signalcoach configs."""
    
    verbose: bool = Field(default=True, description="Enable verbose output")
    
    class Config:
        extra = "allow"
    
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.model_dump()})"


# ============================================================================
# Component Configurations (derived from Settings)
# ============================================================================

class AnalysisConfig(BaseConfig):
    """Configuration for body-language scoring and smoothing."""
    
    window_size: int = Field(default=DEFAULT_WINDOW_SIZE, description="Rolling window size in frames")
    posture_visibility_threshold: float = Field(
        default=DEFAULT_POSTURE_VISIBILITY,
        description="Minimum shoulder visibility for posture scoring",
    )
    gaze_visibility_threshold: float = Field(
        default=DEFAULT_GAZE_VISIBILITY,
        description="Minimum nose visibility for eye-contact scoring",
    )


class DetectionConfig(BaseConfig):
    """Configuration for integrity violation detection."""
    
    # Debounce thresholds
    eye_contact_threshold: float = Field(
        default=DEFAULT_EYE_CONTACT_THRESHOLD,
        description="Eye-contact score below which the user counts as looking away",
    )
    look_away_duration_ms: float = Field(
        default=DEFAULT_LOOK_AWAY_DURATION_MS,
        description="Sustained look-away before an event fires (ms)",
    )
    person_missing_duration_ms: float = Field(
        default=DEFAULT_PERSON_MISSING_DURATION_MS,
        description="Sustained absence before an event fires (ms)",
    )
    
    # Event log
    event_log_capacity: int = Field(default=DEFAULT_EVENT_LOG_CAPACITY, description="Events kept for display")
    
    # Derived signals
    enable_phone_heuristic: bool = Field(default=True, description="Derive phone signal from wrist-near-nose")
    hand_near_face_radius: float = Field(
        default=DEFAULT_HAND_NEAR_FACE_RADIUS,
        description="Normalized wrist-to-nose distance counted as near the face",
    )
    person_visibility_threshold: float = Field(
        default=DEFAULT_PERSON_VISIBILITY,
        description="Minimum nose/shoulder visibility counted as a present person",
    )


class CameraConfig(BaseConfig):
    """Configuration for the local camera pose provider."""
    
    device_index: int = Field(default=DEFAULT_DEVICE_INDEX, description="OpenCV capture device index")
    frame_width: int = Field(default=DEFAULT_FRAME_WIDTH, description="Capture width")
    frame_height: int = Field(default=DEFAULT_FRAME_HEIGHT, description="Capture height")
    process_fps: int = Field(default=DEFAULT_PROCESS_FPS, description="Target frames per second")
    
    # MediaPipe Pose options
    model_complexity: int = Field(default=DEFAULT_MODEL_COMPLEXITY, description="Pose model complexity (0-2)")
    smooth_landmarks: bool = Field(default=True, description="Smooth landmarks across frames")
    min_detection_confidence: float = Field(
        default=DEFAULT_DETECTION_CONFIDENCE,
        description="Pose detection confidence threshold",
    )
    min_tracking_confidence: float = Field(
        default=DEFAULT_TRACKING_CONFIDENCE,
        description="Pose tracking confidence threshold",
    )


# ============================================================================
# Main Settings (Single Source of Truth with Environment Variable Support)
# ============================================================================

class Settings(BaseSettings):
    """
    Application settings with environment variable support.
    
    Every field can be overridden with a ``SIGNALCOACH_`` prefixed
    environment variable (e.g. ``SIGNALCOACH_LOOK_AWAY_DURATION_MS``).
    """
    
    # API
    api_host: str = Field(default=DEFAULT_API_HOST)
    api_port: int = Field(default=DEFAULT_API_PORT)
    log_level: str = Field(default="INFO")
    
    # Analysis
    window_size: int = Field(default=DEFAULT_WINDOW_SIZE)
    
    # Detection
    eye_contact_threshold: float = Field(default=DEFAULT_EYE_CONTACT_THRESHOLD)
    look_away_duration_ms: float = Field(default=DEFAULT_LOOK_AWAY_DURATION_MS)
    person_missing_duration_ms: float = Field(default=DEFAULT_PERSON_MISSING_DURATION_MS)
    event_log_capacity: int = Field(default=DEFAULT_EVENT_LOG_CAPACITY)
    enable_phone_heuristic: bool = Field(default=True)
    hand_near_face_radius: float = Field(default=DEFAULT_HAND_NEAR_FACE_RADIUS)
    
    # Camera
    camera_device_index: int = Field(default=DEFAULT_DEVICE_INDEX)
    frame_width: int = Field(default=DEFAULT_FRAME_WIDTH)
    frame_height: int = Field(default=DEFAULT_FRAME_HEIGHT)
    process_fps: int = Field(default=DEFAULT_PROCESS_FPS)
    model_complexity: int = Field(default=DEFAULT_MODEL_COMPLEXITY)
    
    class Config:
        env_prefix = "SIGNALCOACH_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
    
    def to_analysis_config(self) -> AnalysisConfig:
        """Convert settings to AnalysisConfig."""
        return AnalysisConfig(window_size=self.window_size)
    
    def to_detection_config(self) -> DetectionConfig:
        """Convert settings to DetectionConfig."""
        return DetectionConfig(
            eye_contact_threshold=self.eye_contact_threshold,
            look_away_duration_ms=self.look_away_duration_ms,
            person_missing_duration_ms=self.person_missing_duration_ms,
            event_log_capacity=self.event_log_capacity,
            enable_phone_heuristic=self.enable_phone_heuristic,
            hand_near_face_radius=self.hand_near_face_radius,
        )
    
    def to_camera_config(self) -> CameraConfig:
        """Convert settings to CameraConfig."""
        return CameraConfig(
            device_index=self.camera_device_index,
            frame_width=self.frame_width,
            frame_height=self.frame_height,
            process_fps=self.process_fps,
            model_complexity=self.model_complexity,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
