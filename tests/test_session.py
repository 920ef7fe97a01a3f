"""
CoachingSession lifecycle tests.

Uses an in-memory pose provider; async code is driven with asyncio.run.
"""

import asyncio

import pytest

from signalcoach.data.providers import PoseProvider, ProviderUnavailableError
from signalcoach.service.session import CoachingSession
from signalcoach.utils.alerts import ViolationType
from tests.fixtures.synthetic_pose import looking_away_pose, upright_pose


class FakeProvider(PoseProvider):
    """Replays a fixed list of frames, then idles."""

    def __init__(self, frames=(), fail_open=None):
        self._frames = list(frames)
        self.fail_open = fail_open
        self.opened = False
        self.closed = 0
        self.delivered = 0

    def open(self):
        if self.fail_open is not None:
            raise self.fail_open
        self.opened = True

    async def frames(self):
        for frame in self._frames:
            self.delivered += 1
            yield frame
            await asyncio.sleep(0)
        # Silence is tolerated
        while True:
            await asyncio.sleep(0.01)

    def close(self):
        self.closed += 1


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        value = self.now
        self.now += 50
        return value


async def wait_for(predicate, timeout=2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached")
        await asyncio.sleep(0.005)


class TestSessionLifecycle:
    """start / stop / reset and resource release."""

    def test_consumes_provider_frames(self):
        provider = FakeProvider([upright_pose()] * 10)

        async def run():
            session = CoachingSession(provider=provider)
            await session.start()
            await wait_for(lambda: session.engine.frames_processed == 10)
            await session.stop()
            return session

        session = asyncio.run(run())
        assert provider.opened
        assert provider.closed == 1
        assert not session.running
        assert session.body_metrics.overall_score == 100
        assert session.source == "camera"

    def test_context_manager_releases_provider(self):
        provider = FakeProvider([upright_pose()])

        async def run():
            async with CoachingSession(provider=provider) as session:
                await wait_for(lambda: provider.delivered == 1)
                assert session.running

        asyncio.run(run())
        assert provider.closed == 1

    def test_provider_unavailable_raised_once(self):
        provider = FakeProvider(fail_open=ProviderUnavailableError("no camera"))
        session = CoachingSession(provider=provider)
        with pytest.raises(ProviderUnavailableError):
            asyncio.run(session.start())
        assert not session.running

    def test_unexpected_open_failure_is_wrapped(self):
        provider = FakeProvider(fail_open=OSError("device busy"))
        session = CoachingSession(provider=provider)
        with pytest.raises(ProviderUnavailableError):
            asyncio.run(session.start())

    def test_violations_reach_callback(self):
        seen = []
        provider = FakeProvider([looking_away_pose()] * 60)

        async def run():
            session = CoachingSession(provider=provider, on_violation=seen.append, clock=FakeClock())
            async with session:
                await wait_for(lambda: session.engine.frames_processed == 60)
            return session

        session = asyncio.run(run())
        assert [e.type for e in seen] == [ViolationType.LOOKING_AWAY]
        assert session.cheating_metrics.look_away_count == 1

    def test_bad_frame_does_not_stop_stream(self):
        provider = FakeProvider(["not a frame", upright_pose(), upright_pose()])

        async def run():
            async with CoachingSession(provider=provider) as session:
                await wait_for(lambda: session.engine.frames_processed == 2)
            return session

        session = asyncio.run(run())
        assert session.engine.frames_processed == 2

    def test_reset_keeps_running(self):
        provider = FakeProvider([upright_pose()] * 3)

        async def run():
            async with CoachingSession(provider=provider) as session:
                await wait_for(lambda: session.engine.frames_processed == 3)
                session.on_visibility_change(False)
                session.reset()
                assert session.running
                return session

        session = asyncio.run(run())
        assert session.cheating_metrics.total_violations == 0
        assert session.engine.frames_processed == 0


class TestPushedFrames:
    """Sessions without a local provider."""

    def test_push_frame(self):
        async def run():
            session = CoachingSession(session_id="remote-1")
            await session.start()
            metrics = session.push_frame(upright_pose())
            await session.stop()
            return session, metrics

        session, metrics = asyncio.run(run())
        assert session.source == "remote"
        assert metrics.overall_score == 100
        assert session.engine.frames_processed == 1

    def test_push_before_start_is_ignored(self):
        session = CoachingSession()
        session.push_frame(upright_pose())
        assert session.engine.frames_processed == 0

    def test_summary(self):
        async def run():
            session = CoachingSession(session_id="s-1", clock=FakeClock())
            await session.start()
            for _ in range(50):
                session.push_frame(looking_away_pose())
            session.on_focus_change(False)
            return session.summary(notes=["practice round"])

        summary = asyncio.run(run())
        data = summary.to_dict()
        assert data["session_id"] == "s-1"
        assert data["frames_processed"] == 50
        assert data["looking_away_count"] == 1
        assert data["tab_switch_count"] == 1
        assert data["total_violations"] == 2
        assert data["notes"] == ["practice round"]
        assert 0 <= data["session_score"] <= 100
        assert summary.duration_seconds >= 0
