"""Classified playlist model: one ordered bucket per content kind."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .entry import ContentKind, PlaylistEntry


@dataclass
class ClassifiedPlaylist:
    """Entries of a parsed playlist, bucketed by content kind."""

    channels: List[PlaylistEntry] = field(default_factory=list)
    movies: List[PlaylistEntry] = field(default_factory=list)
    series: List[PlaylistEntry] = field(default_factory=list)

    def bucket(self, kind: ContentKind) -> List[PlaylistEntry]:
        """Get the bucket holding entries of the given kind."""
        if kind == ContentKind.MOVIE:
            return self.movies
        if kind == ContentKind.SERIES:
            return self.series
        return self.channels

    def add(self, entry: PlaylistEntry):
        self.bucket(entry.kind).append(entry)

    def is_empty(self) -> bool:
        return not (self.channels or self.movies or self.series)

    def counts(self) -> Dict[str, int]:
        """Number of entries per kind."""
        return {kind.value: len(self.bucket(kind)) for kind in ContentKind}

    def get_groups(self, kind: ContentKind) -> List[str]:
        """Get distinct group names of a bucket in first-seen order."""
        seen = {}
        for entry in self.bucket(kind):
            seen.setdefault(entry.group, None)
        return list(seen)

    def filter(
        self,
        kind: ContentKind,
        query: str = "",
        group: Optional[str] = None,
    ) -> List[PlaylistEntry]:
        """Search a bucket by name and optionally restrict it to one group."""
        query = query.strip().lower()
        return [
            entry for entry in self.bucket(kind)
            if (not query or query in entry.name.lower())
            and (group is None or entry.group == group)
        ]

    def find(self, entry_id: str) -> Optional[PlaylistEntry]:
        """Look an entry up by id across all buckets."""
        for kind in ContentKind:
            for entry in self.bucket(kind):
                if entry.id == entry_id:
                    return entry
        return None

    def __len__(self) -> int:
        return len(self.channels) + len(self.movies) + len(self.series)
