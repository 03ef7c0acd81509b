"""M3U/M3U8 playlist parser with content type classification."""
import itertools
import logging
import re
import unicodedata
from typing import Optional, Tuple

from ..models.entry import ContentKind, PlaylistEntry, DEFAULT_GROUP, DEFAULT_NAME
from ..models.playlist import ClassifiedPlaylist

logger = logging.getLogger(__name__)


class M3UParser:
    """Parser for M3U and M3U8 playlist text.

    Parsing never raises for content reasons: malformed lines are skipped
    and text without any record yields an empty playlist.
    """

    HEADER_MARKER = "#EXTM3U"
    EXTINF_MARKER = "#EXTINF:"

    GROUP_PATTERN = re.compile(r'group-title="([^"]*)"', re.IGNORECASE)
    LOGO_PATTERN = re.compile(r'tvg-logo="([^"]*)"', re.IGNORECASE)

    # Matched against accent-folded, lower-cased group and name
    MOVIE_PATTERNS = [
        re.compile(r'movie'),
        re.compile(r'film'),  # also covers "filme", "filmes"
    ]
    SERIES_PATTERNS = [
        re.compile(r'serie'),  # also covers "series", "séries"
        re.compile(r'\bshows?\b'),
    ]

    @classmethod
    def parse(cls, content: str) -> ClassifiedPlaylist:
        """Parse playlist text into a classified playlist."""
        playlist = ClassifiedPlaylist()
        ids = itertools.count(1)
        pending: Optional[dict] = None
        orphans = 0

        for line in content.splitlines():
            line = line.strip().lstrip("\ufeff").strip()

            if not line:
                continue

            if line.startswith(cls.EXTINF_MARKER):
                # A second EXTINF before a URL drops the first one
                pending = cls._parse_extinf(line)
                pending["id"] = f"entry-{next(ids)}"
                continue

            if line[:4].lower() == "http":
                if pending is None:
                    orphans += 1
                    continue
                playlist.add(cls._build_entry(pending, line))
                pending = None

        logger.debug(
            "Parsed playlist: %s (%d orphan URLs skipped)",
            playlist.counts(), orphans,
        )
        return playlist

    @classmethod
    def is_recognized(cls, content: str) -> bool:
        """Check whether text looks like an M3U playlist at all."""
        return cls.HEADER_MARKER in content or cls.EXTINF_MARKER in content

    @classmethod
    def classify(cls, name: str, group: str) -> ContentKind:
        """Decide the content kind of an entry from its name and group."""
        haystacks = [cls._fold(group), cls._fold(name)]

        for pattern in cls.MOVIE_PATTERNS:
            if any(pattern.search(text) for text in haystacks):
                return ContentKind.MOVIE

        for pattern in cls.SERIES_PATTERNS:
            if any(pattern.search(text) for text in haystacks):
                return ContentKind.SERIES

        return ContentKind.CHANNEL

    @classmethod
    def split_extinf(cls, line: str) -> Tuple[str, str]:
        """Split an EXTINF line into its attribute segment and its title.

        The title starts after the first comma that is not inside a quoted
        attribute value, so titles may contain commas themselves.
        """
        body = line[len(cls.EXTINF_MARKER):]
        in_quotes = False
        for i, char in enumerate(body):
            if char == '"':
                in_quotes = not in_quotes
            elif char == "," and not in_quotes:
                return body[:i], body[i + 1:].strip()
        # Unbalanced quote: fall back to the last comma
        attributes, comma, title = body.rpartition(",")
        if not comma:
            return body, ""
        return attributes, title.strip()

    @classmethod
    def _parse_extinf(cls, line: str) -> dict:
        """Extract title, group and logo from an EXTINF line."""
        attributes, title = cls.split_extinf(line)

        group_match = cls.GROUP_PATTERN.search(attributes)
        logo_match = cls.LOGO_PATTERN.search(attributes)

        return {
            "name": title or DEFAULT_NAME,
            "group": (group_match.group(1).strip() if group_match else "") or DEFAULT_GROUP,
            "logo_url": (logo_match.group(1).strip() if logo_match else "") or None,
        }

    @classmethod
    def _build_entry(cls, pending: dict, url: str) -> PlaylistEntry:
        return PlaylistEntry(
            id=pending["id"],
            name=pending["name"],
            group=pending["group"],
            logo_url=pending["logo_url"],
            stream_url=url,
            kind=cls.classify(pending["name"], pending["group"]),
        )

    @staticmethod
    def _fold(text: str) -> str:
        """Lower-case and strip accents so "Séries" matches "serie"."""
        decomposed = unicodedata.normalize("NFKD", text.lower())
        return "".join(c for c in decomposed if not unicodedata.combining(c))
