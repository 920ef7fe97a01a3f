from __future__ import annotations
"""
Pose Providers

A provider delivers one ``PoseFrame`` (or None when no person is in view)
per camera frame to a single consumer.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, AsyncIterator, Optional

from signalcoach.cfg import CameraConfig
from signalcoach.engine.landmarks import PoseFrame
from signalcoach.utils.logger import get_logger

if TYPE_CHECKING:
    from signalcoach.data.camera import CameraReceiver
    from signalcoach.models.pose import PoseEstimator

logger = get_logger(__name__)


class ProviderUnavailableError(RuntimeError):
    """The pose provider could not be started."""


class PoseProvider(ABC):
    """
    Base class for pose providers.
    
    Lifecycle: ``open()`` once, iterate ``frames()``, ``close()`` on every
    exit path.
    """
    
    @abstractmethod
    def open(self) -> None:
        """
        Acquire underlying resources.
        
        Raises:
            ProviderUnavailableError: If the provider cannot start
        """
        pass
    
    @abstractmethod
    def frames(self) -> AsyncIterator[Optional[PoseFrame]]:
        """Yield one pose frame per camera frame."""
        pass
    
    @abstractmethod
    def close(self) -> None:
        """
        Release underlying resources. Safe to call more than once.
        
        May block until in-flight device or model calls return, so async
        callers run it in a worker thread.
        """
        pass


class MediaPipePoseProvider(PoseProvider):
    """Local camera + MediaPipe Pose."""
    
    def __init__(
        self,
        cfg: Optional[CameraConfig] = None,
        camera: Optional["CameraReceiver"] = None,
        estimator: Optional["PoseEstimator"] = None,
    ):
        """
        Initialize provider.
        
        Args:
            cfg: Camera configuration
            camera: Camera receiver (created from cfg if omitted)
            estimator: Pose estimator (created from cfg if omitted)
        """
        from signalcoach.data.camera import CameraReceiver
        from signalcoach.models.pose import PoseEstimator
        
        self.cfg = cfg or CameraConfig()
        self.camera = camera or CameraReceiver(self.cfg)
        self.estimator = estimator or PoseEstimator(self.cfg)
        self._executor: Optional[ThreadPoolExecutor] = None
    
    def open(self) -> None:
        try:
            self.estimator.setup_model()
        except Exception as e:
            raise ProviderUnavailableError(f"Pose model unavailable: {e}") from e
        
        try:
            self.camera.open()
        except ProviderUnavailableError:
            self.estimator.close()
            raise
        except Exception as e:
            self.estimator.close()
            raise ProviderUnavailableError(f"Camera unavailable: {e}") from e
        
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pose")
    
    async def frames(self) -> AsyncIterator[Optional[PoseFrame]]:
        loop = asyncio.get_running_loop()
        async for video_frame in self.camera.receive():
            yield await loop.run_in_executor(self._executor, self.estimator.estimate, video_frame.frame)
    
    def close(self) -> None:
        """Release camera and model once their in-flight calls have returned."""
        self.camera.release()
        executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
        self.estimator.close()
