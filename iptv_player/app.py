"""Main application module."""
import logging
import flet as ft
from .config import configure_logging, get_settings
from .models.app_state import AppState, SCREEN_BROWSE, SCREEN_LOAD, SCREEN_PLAYER
from .models.entry import PlaylistEntry
from .models.playlist import ClassifiedPlaylist
from .services.playlist_loader import PlaylistLoader
from .views.browse_view import BrowseView
from .views.load_view import LoadView
from .views.player_view import PlayerView

logger = logging.getLogger(__name__)


class IPTVApp:
    """Main IPTV Player application: load, browse and play screens."""

    def __init__(self, page: ft.Page, state: AppState):
        self.page = page
        self.state = state
        self.loader = PlaylistLoader(state.settings)

        self._setup_page()
        self._setup_views()

    def _setup_page(self):
        """Configure the page settings."""
        self.page.title = self.state.settings.app_name
        self.page.theme_mode = ft.ThemeMode.DARK
        self.page.bgcolor = "#0a0a0f"
        self.page.padding = 0
        self.page.spacing = 0

        self.page.window.min_width = 360
        self.page.window.min_height = 600

        self.page.theme = ft.Theme(color_scheme_seed=ft.Colors.PURPLE)

        # Keyboard handler for global shortcuts
        self.page.on_keyboard_event = self._on_keyboard

    def _setup_views(self):
        """Initialize all views."""
        self._load_view = LoadView(
            state=self.state,
            loader=self.loader,
            on_loaded=self._on_playlist_loaded,
        )
        self._browse_view = BrowseView(
            state=self.state,
            on_entry_select=self._on_entry_select,
            on_load_click=lambda: self._show(SCREEN_LOAD),
        )
        self._player_view = PlayerView(
            state=self.state,
            on_back=self._go_back,
            on_error=self._show_error,
        )
        self._views = {
            SCREEN_LOAD: self._load_view,
            SCREEN_BROWSE: self._browse_view,
            SCREEN_PLAYER: self._player_view,
        }

        # Main container with transition animation
        self._container = ft.Container(
            content=self._views[self.state.screen],
            expand=True,
            animate_opacity=ft.Animation(200, ft.AnimationCurve.EASE_OUT),
        )
        self.page.add(self._container)

    def _animate_view_switch(self, new_view):
        """Animate switching to a new view with fade effect."""
        self._container.opacity = 0
        self._container.update()

        self._container.content = new_view

        self._container.opacity = 1
        self.page.update()

    def _show(self, screen: str):
        self.state.navigate_to(screen)
        self._animate_view_switch(self._views[screen])

    def _go_back(self):
        """Navigate back; leaving the player releases its stream."""
        if self.state.screen == SCREEN_PLAYER:
            self._player_view.stop()
        screen = self.state.go_back()
        self._animate_view_switch(self._views[screen])

    def _on_playlist_loaded(self, playlist: ClassifiedPlaylist):
        self.state.set_playlist(playlist)
        # Loading a playlist starts a fresh history
        self.state.navigation_stack.clear()
        self.state.screen = SCREEN_BROWSE
        self._animate_view_switch(self._browse_view)

    def _on_entry_select(self, entry: PlaylistEntry):
        logger.info("Playing %s (%s)", entry.name, entry.kind.value)
        self._show(SCREEN_PLAYER)
        self._player_view.play_entry(entry)

    def _show_error(self, message: str):
        self.page.open(ft.SnackBar(content=ft.Text(f"Playback Error: {message}")))

    def _on_keyboard(self, e: ft.KeyboardEvent):
        """Handle global keyboard events."""
        if e.key == "Escape" and (self.state.screen != SCREEN_LOAD or self.state.playlist):
            self._go_back()


def main(page: ft.Page):
    """Application entry point."""
    settings = get_settings()
    configure_logging(settings)
    IPTVApp(page, AppState(settings=settings))


def run():
    """Console script entry point."""
    ft.app(target=main)
