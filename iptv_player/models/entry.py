"""Playlist entry model for channels, movies and series episodes."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


DEFAULT_NAME = "Unnamed channel"
DEFAULT_GROUP = "Uncategorized"


class ContentKind(str, Enum):
    """Bucket an entry is classified into."""

    CHANNEL = "channel"
    MOVIE = "movie"
    SERIES = "series"


@dataclass(frozen=True)
class PlaylistEntry:
    """Represents one playable item parsed from a playlist."""

    id: str
    name: str
    stream_url: str
    kind: ContentKind = ContentKind.CHANNEL
    group: str = DEFAULT_GROUP
    logo_url: Optional[str] = None

    def __post_init__(self):
        if not self.stream_url:
            raise ValueError("PlaylistEntry requires a stream URL")

    @property
    def is_adaptive(self) -> bool:
        """True for segmented HLS streams."""
        return ".m3u8" in self.stream_url.lower()

    def to_dict(self) -> dict:
        """Convert entry to a plain dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "group": self.group,
            "logo_url": self.logo_url,
            "stream_url": self.stream_url,
            "kind": self.kind.value,
        }
