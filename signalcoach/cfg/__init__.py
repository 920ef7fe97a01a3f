"""
Signalcoach Configuration Module

Pydantic-based configuration following best practices.
"""

from signalcoach.cfg.config import (
    BaseConfig,
    AnalysisConfig,
    DetectionConfig,
    CameraConfig,
    Settings,
    get_settings,
)

__all__ = [
    "BaseConfig",
    "AnalysisConfig",
    "DetectionConfig",
    "CameraConfig",
    "Settings",
    "get_settings",
]
