from __future__ import annotations
"""
Pose Estimator

Wraps MediaPipe Pose and converts its output into ``PoseFrame`` objects.
"""

from typing import Optional

import numpy as np

from signalcoach.cfg import CameraConfig
from signalcoach.engine.landmarks import PoseFrame
from signalcoach.utils.logger import get_logger

logger = get_logger(__name__)

# Lazy import
mp = None


def _import_mediapipe():
    """Lazy import MediaPipe."""
    global mp
    if mp is None:
        import mediapipe as _mp
        mp = _mp
    return mp


class PoseEstimator:
    """
    MediaPipe Pose wrapper.
    
    Example:
        >>> estimator = PoseEstimator(CameraConfig())
        >>> estimator.setup_model()
        >>> frame = estimator.estimate(rgb_image)
    """
    
    def __init__(self, cfg: Optional[CameraConfig] = None):
        """
        Initialize pose estimator.
        
        Args:
            cfg: Camera / pose configuration
        """
        self.cfg = cfg or CameraConfig()
        self.pose = None
    
    def setup_model(self):
        """Load the MediaPipe Pose model."""
        if self.pose is not None:
            return
        
        mp = _import_mediapipe()
        self.pose = mp.solutions.pose.Pose(
            static_image_mode=False,
            model_complexity=self.cfg.model_complexity,
            smooth_landmarks=self.cfg.smooth_landmarks,
            enable_segmentation=False,
            min_detection_confidence=self.cfg.min_detection_confidence,
            min_tracking_confidence=self.cfg.min_tracking_confidence,
        )
        logger.info(f"✅ MediaPipe Pose loaded (complexity={self.cfg.model_complexity})")
    
    def estimate(self, image: np.ndarray) -> Optional[PoseFrame]:
        """
        Estimate body landmarks in one image.
        
        Args:
            image: RGB image as numpy array
            
        Returns:
            PoseFrame, or None when no person was found
        """
        if self.pose is None:
            self.setup_model()
        
        if image is None or image.ndim != 3 or image.shape[2] != 3:
            return None
        
        results = self.pose.process(image)
        if results.pose_landmarks is None:
            return None
        
        return PoseFrame.from_landmarks(results.pose_landmarks.landmark)
    
    def close(self):
        """Release resources."""
        if self.pose is not None:
            self.pose.close()
            self.pose = None
