"""
Signalcoach API Module

FastAPI server for session control and metrics.
"""

from signalcoach.api.server import app, start_server

__all__ = ["app", "start_server"]
