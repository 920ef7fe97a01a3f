"""
Signalcoach Data Module

Camera capture and pose providers.
"""

from signalcoach.data.providers import (
    PoseProvider,
    MediaPipePoseProvider,
    ProviderUnavailableError,
)
from signalcoach.data.camera import CameraReceiver, CameraUnavailableError, VideoFrame

__all__ = [
    "PoseProvider",
    "MediaPipePoseProvider",
    "ProviderUnavailableError",
    "CameraReceiver",
    "CameraUnavailableError",
    "VideoFrame",
]
