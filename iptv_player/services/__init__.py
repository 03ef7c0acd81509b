# Services package
from .m3u_parser import M3UParser
from .playlist_loader import PlaylistLoader
from .playback_session import PlaybackSession, LoadState, direct_attach, track_progress
