"""Playlist loading from URLs and local files."""
import logging
from typing import Callable, List, Optional
from urllib.parse import quote

import aiofiles
import httpx

from ..config import Settings
from ..errors import (
    EmptyPlaylistError,
    PlaylistDownloadError,
    PlaylistError,
    UnrecognizedPlaylistError,
)
from ..models.playlist import ClassifiedPlaylist
from .m3u_parser import M3UParser

logger = logging.getLogger(__name__)


class PlaylistLoader:
    """Fetches raw playlist text and turns it into a classified playlist."""

    CHUNK_SIZE = 65536  # 64KB chunks

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    def _create_client(self) -> httpx.AsyncClient:
        timeout = httpx.Timeout(self.settings.request_timeout, connect=self.settings.connect_timeout)
        return httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            transport=self._transport,
        )

    def _candidate_urls(self, url: str) -> List[str]:
        """Direct URL first, then at most one retry through the proxy."""
        urls = [url]
        if self.settings.fallback_proxy:
            urls.append(self.settings.fallback_proxy.format(url=quote(url, safe="")))
        return urls

    async def _download(
        self,
        client: httpx.AsyncClient,
        url: str,
        progress_callback: Optional[Callable[[int, int], None]],
    ) -> str:
        async with client.stream("GET", url) as response:
            response.raise_for_status()

            total_size = int(response.headers.get("content-length", 0))
            downloaded = 0
            chunks = []

            async for chunk in response.aiter_bytes(chunk_size=self.CHUNK_SIZE):
                chunks.append(chunk)
                downloaded += len(chunk)

                if progress_callback and total_size > 0:
                    progress_callback(downloaded, total_size)

            return b"".join(chunks).decode("utf-8", errors="ignore")

    async def fetch_text(
        self,
        url: str,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> str:
        """Download playlist text, retrying once through the fallback proxy."""
        url = url.strip()
        if not url:
            raise PlaylistError("URL is required")
        try:
            httpx.URL(url)
        except httpx.InvalidURL as e:
            raise PlaylistError(f"Invalid URL: {e}") from e

        last_error = None
        async with self._create_client() as client:
            for attempt, candidate in enumerate(self._candidate_urls(url)):
                try:
                    return await self._download(client, candidate, progress_callback)
                except httpx.TimeoutException:
                    last_error = "Timeout"
                except httpx.HTTPStatusError as e:
                    last_error = f"HTTP {e.response.status_code}"
                except httpx.HTTPError as e:
                    last_error = str(e) or e.__class__.__name__
                except httpx.InvalidURL as e:
                    last_error = f"Invalid URL: {e}"

                if attempt == 0 and self.settings.fallback_proxy:
                    logger.warning("Direct download of %s failed (%s), retrying through proxy", url, last_error)

        logger.error("Failed to download playlist %s: %s", url, last_error)
        raise PlaylistDownloadError(f"Failed to download playlist: {last_error}")

    async def load_from_url(
        self,
        url: str,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> ClassifiedPlaylist:
        """Load and classify a playlist from a URL."""
        content = await self.fetch_text(url, progress_callback)
        playlist = self.load_text(content)
        logger.info("Loaded playlist from %s: %s", url, playlist.counts())
        return playlist

    async def load_from_file(self, file_path: str) -> ClassifiedPlaylist:
        """Load and classify a playlist from a local file."""
        try:
            async with aiofiles.open(file_path, "r", encoding="utf-8", errors="ignore") as f:
                content = await f.read()
        except OSError as e:
            raise PlaylistDownloadError(f"Failed to read file: {e}") from e

        playlist = self.load_text(content)
        logger.info("Loaded playlist from %s: %s", file_path, playlist.counts())
        return playlist

    @staticmethod
    def load_text(content: str) -> ClassifiedPlaylist:
        """Validate and parse raw playlist text.

        Raises UnrecognizedPlaylistError when neither M3U marker is present
        and EmptyPlaylistError when nothing playable was found.
        """
        if not M3UParser.is_recognized(content):
            raise UnrecognizedPlaylistError()

        playlist = M3UParser.parse(content)
        if playlist.is_empty():
            raise EmptyPlaylistError()
        return playlist
