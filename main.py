"""
Signalcoach - Main Entry Point

Usage:
    python main.py                      # Start API server (default)
    python main.py serve --port 8001    # Start on specific port
    python main.py watch --duration 60  # Score the local camera in the terminal
    
API Endpoints:
    POST /sessions                  - Start a session (camera or remote)
    POST /sessions/{id}/frames      - Push a pose frame
    POST /sessions/{id}/visibility  - Tab visibility changed
    POST /sessions/{id}/focus       - Window focus changed
    GET  /sessions/{id}/metrics     - Current scores and integrity counters
    POST /sessions/{id}/stop        - Stop a session
    GET  /status                    - Active sessions
    GET  /health                    - Health check
"""
from __future__ import annotations

import argparse
import asyncio


def serve(args):
    """Run the HTTP API."""
    from signalcoach.cfg import get_settings
    
    settings = get_settings()
    host = args.host or settings.api_host
    port = args.port or settings.api_port
    
    print("🚀 Starting Signalcoach API...")
    print(f"📡 Listening on http://{host}:{port}")
    print()
    
    from signalcoach.api.server import start_server
    start_server(host=host, port=port)


async def _watch(duration: float, interval: float):
    from signalcoach.cfg import get_settings
    from signalcoach.data.providers import MediaPipePoseProvider
    from signalcoach.service.session import CoachingSession
    
    settings = get_settings()
    provider = MediaPipePoseProvider(settings.to_camera_config())
    session = CoachingSession(
        provider=provider,
        analysis_config=settings.to_analysis_config(),
        detection_config=settings.to_detection_config(),
        on_violation=lambda event: print(f"⚠️  {event.message}"),
    )
    
    loop = asyncio.get_running_loop()
    deadline = loop.time() + duration if duration > 0 else None
    
    async with session:
        while deadline is None or loop.time() < deadline:
            await asyncio.sleep(interval)
            body = session.body_metrics
            print(
                f"posture={body.posture_score:3d} "
                f"eye={body.eye_contact_score:3d} "
                f"hands={body.hand_movement_level.value:<8} "
                f"overall={body.overall_score:3d} "
                f"| {body.primary_feedback or ''}"
            )
    
    summary = session.summary()
    print()
    print(f"📊 Session score: {summary.session_score}")
    print(f"   Violations: {summary.integrity.total_violations} ({summary.integrity.suspicion_level.value})")


def watch(args):
    """Score the local camera and print metrics."""
    from signalcoach.data.providers import ProviderUnavailableError
    
    try:
        asyncio.run(_watch(args.duration, args.interval))
    except ProviderUnavailableError as e:
        print(f"❌ Camera unavailable: {e}")
        raise SystemExit(1)
    except KeyboardInterrupt:
        print("\n👋 Stopped")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Signalcoach body-language and integrity signals")
    parser.add_argument("--log-level", default=None, help="Logging level")
    subparsers = parser.add_subparsers(dest="command")
    
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", default=None, help="Server host")
    serve_parser.add_argument("--port", type=int, default=None, help="Server port")
    serve_parser.set_defaults(func=serve)
    
    watch_parser = subparsers.add_parser("watch", help="Score the local camera")
    watch_parser.add_argument("--duration", type=float, default=0, help="Seconds to run, 0 for until Ctrl+C")
    watch_parser.add_argument("--interval", type=float, default=1.0, help="Seconds between printed snapshots")
    watch_parser.set_defaults(func=watch)
    
    args = parser.parse_args()
    
    from signalcoach.cfg import get_settings
    from signalcoach.utils import setup_logging
    setup_logging(args.log_level or get_settings().log_level)
    
    if args.command is None:
        args = parser.parse_args(["serve"])
    args.func(args)


if __name__ == "__main__":
    main()
