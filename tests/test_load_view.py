"""
Tests for the load screen's status reporting.
"""
import pytest

from iptv_player.errors import PlaylistDownloadError
from iptv_player.models.app_state import AppState
from iptv_player.services.playlist_loader import PlaylistLoader
from iptv_player.views.load_view import LoadView


class ScriptedLoader:
    """Loader that returns a fixed result or raises a fixed error."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    async def load_from_url(self, url, progress_callback=None):
        if progress_callback:
            progress_callback(50, 100)
        if self.error:
            raise self.error
        return self.result


def make_view(settings, loader, loaded=None):
    on_loaded = loaded.append if loaded is not None else None
    view = LoadView(state=AppState(settings=settings), loader=loader, on_loaded=on_loaded)
    view._url_field.value = "http://provider.example.com/list.m3u"
    return view


class TestLoadFromUrl:

    @pytest.mark.asyncio
    async def test_success_reports_counts(self, settings, sample_m3u_content):
        loaded = []
        playlist = PlaylistLoader.load_text(sample_m3u_content)
        view = make_view(settings, ScriptedLoader(result=playlist), loaded)

        await view._load_from_url()

        assert loaded == [playlist]
        assert "1 channels, 1 movies, 0 series" in view._status_text.value
        assert not view._progress_text.visible

    @pytest.mark.asyncio
    async def test_playlist_error_is_shown(self, settings):
        view = make_view(settings, ScriptedLoader(error=PlaylistDownloadError("Failed to download playlist: HTTP 404")))

        await view._load_from_url()

        assert view._status_text.value == "Error: Failed to download playlist: HTTP 404"
        assert not view._progress_bar.visible
        assert not view._load_button.disabled

    @pytest.mark.asyncio
    async def test_unexpected_error_clears_progress(self, settings):
        view = make_view(settings, ScriptedLoader(error=RuntimeError("boom")))

        await view._load_from_url()

        assert view._status_text.value == "Error: Unexpected error: boom"
        assert not view._progress_text.visible
        assert view._progress_text.value == ""
        assert not view._is_loading
