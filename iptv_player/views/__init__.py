# Views package
from .load_view import LoadView
from .browse_view import BrowseView
from .player_view import PlayerView
