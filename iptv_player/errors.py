"""Exceptions raised by the playlist loader and the playback session."""


class PlayerError(Exception):
    """Base class for all IPTV player errors."""


class PlaylistError(PlayerError):
    """A playlist could not be turned into browsable content."""


class UnrecognizedPlaylistError(PlaylistError):
    """The text contains neither an #EXTM3U header nor an #EXTINF line."""

    def __init__(self, message: str = "Unrecognized playlist format"):
        super().__init__(message)


class EmptyPlaylistError(PlaylistError):
    """The playlist was parsed but holds no playable entries."""

    def __init__(self, message: str = "No playable content found"):
        super().__init__(message)


class PlaylistDownloadError(PlaylistError):
    """Fetching or reading the playlist failed."""


class SessionError(PlayerError):
    """A playback session was used in a way it does not support."""
