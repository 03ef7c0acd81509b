"""Browse view - channels, movies and series of the loaded playlist."""
import flet as ft
from typing import Callable, Optional
from ..components.entry_list import EntryList
from ..models.app_state import AppState
from ..models.entry import PlaylistEntry


class BrowseView(ft.Container):
    """Tabbed browser over the three playlist buckets."""

    def __init__(
        self,
        state: AppState,
        on_entry_select: Optional[Callable[[PlaylistEntry], None]] = None,
        on_load_click: Optional[Callable] = None,
    ):
        super().__init__()
        self._state = state
        self._on_load_click = on_load_click
        self._entry_list = EntryList(
            page_size=state.settings.page_size,
            on_entry_select=on_entry_select,
        )
        state.on_playlist_change(self._entry_list.set_playlist)

        self._build_ui()

    def _build_ui(self):
        """Build the browse view."""
        header = ft.Container(
            content=ft.Row(
                [
                    ft.Row(
                        [
                            ft.Icon(ft.Icons.LIVE_TV_ROUNDED, size=28, color="#a78bfa"),
                            ft.Text(
                                self._state.settings.app_name,
                                size=22,
                                weight=ft.FontWeight.BOLD,
                                color=ft.Colors.WHITE,
                            ),
                        ],
                        spacing=12,
                    ),
                    ft.IconButton(
                        icon=ft.Icons.PLAYLIST_ADD_ROUNDED,
                        icon_color=ft.Colors.WHITE70,
                        tooltip="Load another playlist",
                        on_click=lambda e: self._on_load_click and self._on_load_click(),
                    ),
                ],
                alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
            ),
            padding=ft.padding.symmetric(horizontal=20, vertical=12),
            bgcolor="#1a1a2e",
        )

        self.content = ft.Column([header, self._entry_list], expand=True, spacing=0)
        self.expand = True
        self.bgcolor = "#0a0a0f"
