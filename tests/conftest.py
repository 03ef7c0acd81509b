"""
Pytest configuration and fixtures for IPTV player tests.
"""
import pytest

from iptv_player.config import Settings


class FakeMedia:
    """Records the calls a playback session makes on its media element."""

    def __init__(self, fail_on_play=False):
        self.fail_on_play = fail_on_play
        self.calls = []
        self.volume = None
        self.position = None

    def play(self):
        self.calls.append("play")
        if self.fail_on_play:
            raise RuntimeError("resource rejected")

    def pause(self):
        self.calls.append("pause")

    def seek(self, seconds):
        self.calls.append("seek")
        self.position = seconds

    def set_volume(self, level):
        self.volume = level


class FakeAttach:
    """Attach capability that counts attach and detach calls."""

    def __init__(self):
        self.attached = []
        self.detach_count = 0

    def __call__(self, url, media):
        self.attached.append((url, media))

        def detach():
            self.detach_count += 1

        return detach


@pytest.fixture
def settings():
    """Settings isolated from the environment and .env files."""
    return Settings(_env_file=None)


@pytest.fixture
def fake_media():
    return FakeMedia()


@pytest.fixture
def fake_attach():
    return FakeAttach()


@pytest.fixture
def sample_m3u_content():
    """Sample M3U content with a movie and a live channel."""
    return """#EXTM3U
#EXTINF:-1 group-title="Filmes" tvg-logo="http://x/l.png",Matrix
http://cdn/matrix.m3u8
#EXTINF:-1 group-title="Abertos",Canal 1
http://cdn/canal1.ts
"""


@pytest.fixture
def mixed_m3u_content():
    """Playlist touching every bucket, with repeats and noise lines."""
    return """#EXTM3U x-tvg-url="http://epg.example.com/guide.xml"
#EXTINF:-1 tvg-id="news.br" group-title="News",News 24
http://example.com/news.m3u8
#EXTINF:-1 group-title="Series Drama",Lost S01E01
http://example.com/lost-s01e01.mp4
#EXTINF:-1 group-title="Movies",Inception (2010)
http://example.com/inception.mp4
#EXTVLCOPT:http-user-agent=Mozilla
#EXTINF:-1 group-title="News",News 24
http://example.com/news.m3u8
#EXTINF:-1 group-title="Kids",Cartoon Show
http://example.com/cartoon.m3u8
"""


class ReportingMedia(FakeMedia):
    """Media that answers progress queries from a script of (position, duration) reports.

    An exception in the script is raised from that query. When the script
    runs out the session is closed, which ends any tracking loop.
    """

    def __init__(self, reports, session=None):
        super().__init__()
        self.reports = list(reports)
        self.session = session
        self.queries = 0

    async def query_progress(self):
        self.queries += 1
        if not self.reports:
            if self.session is not None:
                self.session.close()
            return 0.0, 0.0
        report = self.reports.pop(0)
        if isinstance(report, Exception):
            raise report
        return report
