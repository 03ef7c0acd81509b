"""
Tests for the playback session state machine.
"""
import math

import pytest

from iptv_player.errors import SessionError
from iptv_player.services.playback_session import LoadState, PlaybackSession, track_progress
from conftest import FakeMedia, ReportingMedia


URL = "http://cdn/matrix.m3u8"


@pytest.fixture
def session(fake_attach):
    return PlaybackSession(URL, attach=fake_attach)


@pytest.fixture
def ready_session(session, fake_media):
    session.mount(fake_media)
    session.on_can_play(duration=120)
    return session


class TestLifecycle:

    def test_idle_loading_ready(self, session, fake_media, fake_attach):
        assert session.load_state == LoadState.IDLE

        session.mount(fake_media)
        assert session.load_state == LoadState.LOADING
        assert fake_attach.attached == [(URL, fake_media)]

        session.on_can_play(duration=90)
        assert session.load_state == LoadState.READY
        assert session.duration_seconds == 90
        assert session.playing is False

    def test_can_play_before_mount_is_ignored(self, session):
        session.on_can_play()
        assert session.load_state == LoadState.IDLE

    def test_double_mount_raises(self, session, fake_media):
        session.mount(fake_media)
        with pytest.raises(SessionError):
            session.mount(FakeMedia())

    def test_attach_failure_moves_to_error(self, fake_media):
        def broken_attach(url, media):
            raise RuntimeError("unsupported")

        session = PlaybackSession(URL, attach=broken_attach)
        session.mount(fake_media)
        assert session.load_state == LoadState.ERROR
        assert "unsupported" in session.error_message

    def test_close_detaches_exactly_once(self, ready_session, fake_attach):
        ready_session.close()
        ready_session.close()
        assert fake_attach.detach_count == 1
        assert ready_session.closed

    def test_late_events_after_close_are_noops(self, ready_session, fake_media):
        ready_session.close()
        ready_session.on_progress(50, 120)
        ready_session.on_media_error("decode failure")
        ready_session.on_can_play()

        assert ready_session.position_seconds == 0
        assert ready_session.load_state == LoadState.READY
        assert ready_session.play() is False
        assert "play" not in fake_media.calls

    def test_listeners_are_notified(self, session, fake_media):
        states = []
        session.add_listener(lambda s: states.append(s.load_state))
        session.mount(fake_media)
        session.on_can_play()
        assert states[:2] == [LoadState.LOADING, LoadState.READY]


class TestPlayPause:

    def test_play_when_ready(self, ready_session, fake_media):
        assert ready_session.play() is True
        assert ready_session.playing
        assert fake_media.calls == ["play"]

    def test_play_before_ready_is_queued(self, session, fake_media):
        assert session.play() is False
        assert session.play_requested

        session.mount(fake_media)
        assert session.play() is False
        assert fake_media.calls == []

        session.on_can_play()
        assert session.playing
        assert not session.play_requested
        assert fake_media.calls == ["play"]

    def test_pause_cancels_queued_play(self, session, fake_media):
        session.mount(fake_media)
        session.play()
        session.pause()
        session.on_can_play()
        assert not session.playing
        assert fake_media.calls == []

    def test_pause(self, ready_session, fake_media):
        ready_session.play()
        ready_session.pause()
        assert not ready_session.playing
        assert fake_media.calls == ["play", "pause"]

    def test_toggle_play(self, ready_session):
        assert ready_session.toggle_play() is True
        assert ready_session.toggle_play() is False
        assert not ready_session.playing

    def test_rejected_play_moves_to_error(self, session):
        media = FakeMedia(fail_on_play=True)
        session.mount(media)
        session.on_can_play()

        assert session.play() is False
        assert session.load_state == LoadState.ERROR
        assert "resource rejected" in session.error_message
        assert not session.playing

    def test_media_error_stops_playback(self, ready_session):
        ready_session.play()
        ready_session.on_media_error("decode failure")
        assert ready_session.load_state == LoadState.ERROR
        assert ready_session.error_message == "decode failure"
        assert not ready_session.playing

    def test_error_is_terminal(self, ready_session, fake_media):
        ready_session.on_media_error("boom")
        ready_session.on_can_play()
        assert ready_session.load_state == LoadState.ERROR
        assert ready_session.play() is False
        assert "play" not in fake_media.calls


class TestSeek:

    def test_seek_clamps(self, ready_session, fake_media):
        ready_session.seek(500)
        assert ready_session.position_seconds == 120
        ready_session.seek(-5)
        assert ready_session.position_seconds == 0
        assert fake_media.position == 0

    def test_seek_keeps_play_state(self, ready_session):
        ready_session.play()
        ready_session.seek(30)
        assert ready_session.playing

    def test_skip(self, ready_session):
        ready_session.on_progress(100)
        ready_session.skip(10)
        assert ready_session.position_seconds == 110
        ready_session.skip(60)
        assert ready_session.position_seconds == 120
        ready_session.skip(-500)
        assert ready_session.position_seconds == 0

    def test_seek_ignored_in_error(self, ready_session):
        ready_session.on_progress(40)
        ready_session.on_media_error("boom")
        ready_session.seek(10)
        assert ready_session.position_seconds == 40

    def test_seek_while_loading(self, session, fake_media):
        session.mount(fake_media)
        session.seek(10)
        # Duration is still unknown
        assert session.position_seconds == 0

    def test_live_stream_duration(self, session, fake_media):
        session.mount(fake_media)
        session.on_can_play(duration=math.inf)
        assert session.duration_seconds == 0
        session.on_progress(12.5, math.nan)
        assert session.duration_seconds == 0
        assert session.position_seconds == 12.5


class TestVolume:

    def test_set_volume_clamps(self, ready_session, fake_media):
        ready_session.set_volume(1.7)
        assert ready_session.volume == 1.0
        ready_session.set_volume(-1)
        assert ready_session.volume == 0.0
        assert ready_session.muted
        assert fake_media.volume == 0.0

    def test_mute_restores_previous_volume(self, ready_session, fake_media):
        ready_session.set_volume(0.6)
        ready_session.toggle_mute()
        assert ready_session.muted
        assert ready_session.effective_volume == 0
        assert fake_media.volume == 0

        ready_session.toggle_mute()
        assert not ready_session.muted
        assert ready_session.volume == 0.6
        assert fake_media.volume == 0.6

    def test_zero_volume_is_not_raised_by_unmute(self, ready_session, fake_media):
        ready_session.set_volume(0)
        assert ready_session.muted

        ready_session.toggle_mute()
        assert ready_session.effective_volume == 0
        ready_session.toggle_mute()

        assert ready_session.volume == 0
        assert ready_session.effective_volume == 0
        assert fake_media.volume == 0

    def test_initial_volume_applied_on_mount(self, fake_attach, fake_media):
        session = PlaybackSession(URL, attach=fake_attach, volume=0.3)
        session.mount(fake_media)
        assert fake_media.volume == 0.3


class TestFullscreen:

    def test_toggle_forwards_request(self, session):
        requests = []
        session = PlaybackSession(URL, request_fullscreen=requests.append)
        session.toggle_fullscreen()
        session.toggle_fullscreen()
        assert requests == [True, False]
        assert session.fullscreen is False

    def test_optimistic_without_surface(self, session):
        session.toggle_fullscreen()
        assert session.fullscreen is True


def watch_ready(session, media):
    """Record how many progress queries had run when the session became ready."""
    ready_at = []

    def listener(s):
        if s.load_state == LoadState.READY and not ready_at:
            ready_at.append(media.queries)

    session.add_listener(listener)
    return ready_at


class TestTrackProgress:
    """Progress polling drives the loading -> ready transition."""

    @pytest.mark.asyncio
    async def test_stays_loading_until_media_reports(self, session):
        media = ReportingMedia([(0, 0), (0, 0), (0, 95)], session=session)
        session.mount(media)
        ready_at = watch_ready(session, media)

        await track_progress(session, media, interval=0)

        assert ready_at == [3]
        assert session.duration_seconds == 95

    @pytest.mark.asyncio
    async def test_queued_play_starts_buffering_then_plays_on_ready(self, session):
        media = ReportingMedia([(0, 0), (2.0, 0)], session=session)
        session.mount(media)
        session.play()
        playing_when_ready = []
        session.add_listener(
            lambda s: s.load_state == LoadState.READY and playing_when_ready.append(s.playing)
        )

        await track_progress(session, media, interval=0)

        # Forwarded once while loading, then started by the session
        assert media.calls == ["play", "play"]
        assert True in playing_when_ready

    @pytest.mark.asyncio
    async def test_no_play_without_request(self, session):
        media = ReportingMedia([(0, 0), (0, 30)], session=session)
        session.mount(media)
        ready_at = watch_ready(session, media)

        await track_progress(session, media, interval=0)

        assert media.calls == []
        assert ready_at == [2]

    @pytest.mark.asyncio
    async def test_progress_after_ready(self, session):
        media = ReportingMedia([(5, 120), (6.5, 120)], session=session)
        session.mount(media)
        session.on_can_play(duration=120)

        await track_progress(session, media, interval=0)

        assert session.position_seconds == 6.5
        assert session.duration_seconds == 120

    @pytest.mark.asyncio
    async def test_failed_query_is_skipped(self, session):
        media = ReportingMedia([RuntimeError("not opened"), (0, 60)], session=session)
        session.mount(media)

        await track_progress(session, media, interval=0)

        assert session.duration_seconds == 60

    @pytest.mark.asyncio
    async def test_returns_on_error(self, session):
        media = ReportingMedia([(0, 60)])
        session.mount(media)
        session.on_media_error("decode failed")

        await track_progress(session, media, interval=0)

        assert media.queries == 0
        assert session.load_state == LoadState.ERROR

    @pytest.mark.asyncio
    async def test_returns_when_closed(self, session):
        media = ReportingMedia([(0, 60)])
        session.mount(media)
        session.close()

        await track_progress(session, media, interval=0)

        assert media.queries == 0
