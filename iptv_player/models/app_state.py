"""Application state shared by the views of one running app."""
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..config import Settings
from .entry import PlaylistEntry
from .playlist import ClassifiedPlaylist


SCREEN_LOAD = "load"
SCREEN_BROWSE = "browse"
SCREEN_PLAYER = "player"


@dataclass
class AppState:
    """Explicit app state passed by reference into every view.

    Nothing here is persisted: a new app starts on the load screen with
    no playlist.
    """

    settings: Settings
    playlist: Optional[ClassifiedPlaylist] = None
    current_entry: Optional[PlaylistEntry] = None
    screen: str = SCREEN_LOAD
    navigation_stack: List[str] = field(default_factory=list)
    _on_playlist_change: List[Callable] = field(default_factory=list, repr=False)
    _on_entry_change: List[Callable] = field(default_factory=list, repr=False)

    # Playlist

    def set_playlist(self, playlist: ClassifiedPlaylist):
        """Replace the loaded playlist and notify listeners."""
        self.playlist = playlist
        self.current_entry = None
        for callback in self._on_playlist_change:
            callback(playlist)

    def on_playlist_change(self, callback: Callable):
        self._on_playlist_change.append(callback)

    # Current entry

    def select_entry(self, entry: PlaylistEntry):
        """Set the entry the player should show."""
        self.current_entry = entry
        for callback in self._on_entry_change:
            callback(entry)

    def on_entry_change(self, callback: Callable):
        self._on_entry_change.append(callback)

    def neighbour(self, entry: PlaylistEntry, delta: int) -> Optional[PlaylistEntry]:
        """Get the entry `delta` steps away inside the same bucket, wrapping around."""
        if not self.playlist:
            return None
        bucket = self.playlist.bucket(entry.kind)
        for i, candidate in enumerate(bucket):
            if candidate.id == entry.id:
                return bucket[(i + delta) % len(bucket)]
        return None

    # Navigation

    def navigate_to(self, screen: str):
        """Push the current screen and switch to another one."""
        if screen == self.screen:
            return
        self.navigation_stack.append(self.screen)
        self.screen = screen

    def go_back(self) -> str:
        """Pop the navigation stack; falls back to browse or load."""
        if self.navigation_stack:
            self.screen = self.navigation_stack.pop()
        else:
            self.screen = SCREEN_BROWSE if self.playlist else SCREEN_LOAD
        return self.screen
