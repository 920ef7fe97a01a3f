from __future__ import annotations
"""
Camera Receiver

Reads frames from a local camera with OpenCV.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

import numpy as np

from signalcoach.cfg import CameraConfig
from signalcoach.data.providers import ProviderUnavailableError
from signalcoach.utils.logger import get_logger

logger = get_logger(__name__)


class CameraUnavailableError(ProviderUnavailableError):
    """The capture device could not be opened."""


@dataclass
class VideoFrame:
    """A captured video frame with metadata."""
    frame: np.ndarray
    width: int
    height: int
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    frame_number: int = 0


class CameraReceiver:
    """
    Receives RGB frames from a local capture device.
    
    Handles device acquisition, color conversion and rate limiting.
    
    Example:
        >>> receiver = CameraReceiver(CameraConfig(process_fps=15))
        >>> receiver.open()
        >>> async for frame in receiver.receive():
        ...     process(frame)
        >>> receiver.release()
    """
    
    def __init__(self, cfg: Optional[CameraConfig] = None):
        """
        Initialize camera receiver.
        
        Args:
            cfg: Camera configuration
        """
        self.cfg = cfg or CameraConfig()
        self.running = False
        self.frame_count = 0
        self._capture = None
        # Capture calls run on one worker so release can wait for an in-flight read
        self._executor: Optional[ThreadPoolExecutor] = None
    
    @property
    def is_open(self) -> bool:
        return self._capture is not None
    
    def open(self):
        """
        Acquire the capture device.
        
        Raises:
            CameraUnavailableError: If OpenCV cannot open the device
        """
        if self._capture is not None:
            return
        
        import cv2
        
        capture = cv2.VideoCapture(self.cfg.device_index)
        if not capture.isOpened():
            capture.release()
            raise CameraUnavailableError(f"Cannot open camera device {self.cfg.device_index}")
        
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.cfg.frame_width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.cfg.frame_height)
        
        self._capture = capture
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="camera")
        self.running = True
        logger.info(f"📹 Camera {self.cfg.device_index} opened at {self.cfg.frame_width}x{self.cfg.frame_height}")
    
    async def receive(self) -> AsyncGenerator[VideoFrame, None]:
        """
        Receive frames until stopped.
        
        Failed reads are skipped, so a silent camera simply yields nothing.
        
        Yields:
            VideoFrame objects at roughly the target FPS
        """
        import cv2
        
        interval = 1.0 / max(1, self.cfg.process_fps)
        loop = asyncio.get_running_loop()
        
        while self.running and self._capture is not None:
            started = loop.time()
            ok, bgr = await loop.run_in_executor(self._executor, self._capture.read)
            
            if ok and bgr is not None:
                self.frame_count += 1
                rgb = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
                yield VideoFrame(
                    frame=rgb,
                    width=rgb.shape[1],
                    height=rgb.shape[0],
                    frame_number=self.frame_count,
                )
            
            elapsed = loop.time() - started
            await asyncio.sleep(max(0.0, interval - elapsed))
    
    def stop(self):
        """Stop receiving frames."""
        self.running = False
    
    def release(self):
        """
        Stop and release the capture device.
        
        Blocks until a read already running on the capture worker returns;
        cv2.VideoCapture must not be released underneath it.
        """
        self.stop()
        executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info(f"📹 Camera {self.cfg.device_index} released")
