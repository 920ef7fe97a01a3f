from __future__ import annotations
"""
Signalcoach Logger

Centralized logging configuration.
"""

import logging
import sys
from typing import Optional


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(
    name: str,
    level: int = logging.INFO,
    format_str: Optional[str] = None,
) -> logging.Logger:
    """
    Get a configured logger.
    
    Args:
        name: Logger name (usually __name__)
        level: Logging level
        format_str: Custom format string
        
    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(format_str or LOG_FORMAT))
        
        logger.addHandler(handler)
        logger.setLevel(level)
    
    return logger


def setup_logging(level: str = "INFO") -> None:
    """
    Setup root logging configuration.
    
    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)
    
    # Reduce noise from other libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


class ViolationLogger:
    """Specialized logger for integrity and coaching session events."""
    
    def __init__(self, session_id: str | None = None):
        self.logger = get_logger("signalcoach.session")
        self.session_id = session_id
    
    def log_violation(
        self,
        violation_type: str,
        message: str,
        total: int,
        suspicion: str,
    ):
        """Log a recorded integrity violation."""
        self.logger.warning(
            f"VIOLATION | {self.session_id} | {violation_type} | {message} | total={total} | suspicion={suspicion}"
        )
    
    def log_frame(self, frame_num: int, processing_time_ms: float):
        """Log frame processing."""
        self.logger.debug(
            f"FRAME | {self.session_id} | #{frame_num} | {processing_time_ms:.1f}ms"
        )
    
    def log_session(self, event: str, **details):
        """Log session lifecycle events."""
        extra = " | ".join(f"{key}={value}" for key, value in details.items())
        self.logger.info(
            f"SESSION | {self.session_id} | {event}" + (f" | {extra}" if extra else "")
        )
