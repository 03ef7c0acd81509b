# Models package
from .entry import ContentKind, PlaylistEntry
from .playlist import ClassifiedPlaylist
from .app_state import AppState
