"""Player view - full screen video player."""
import flet as ft
from typing import Callable, Optional
from ..components.video_player import VideoPlayerComponent
from ..models.app_state import AppState
from ..models.entry import PlaylistEntry


class PlayerView(ft.Container):
    """Full screen video player view."""

    def __init__(
        self,
        state: AppState,
        on_back: Optional[Callable] = None,
        on_error: Optional[Callable[[str], None]] = None,
    ):
        super().__init__()
        self._state = state
        self._on_back = on_back

        # Created once; each entry gets its own playback session inside it
        self._video_player = VideoPlayerComponent(state.settings, on_error=on_error)

        self._name_text = ft.Text(
            "",
            size=16,
            weight=ft.FontWeight.BOLD,
            color=ft.Colors.WHITE,
            max_lines=1,
            overflow=ft.TextOverflow.ELLIPSIS,
        )
        self._group_text = ft.Text("", size=12, color=ft.Colors.WHITE54)

        self._build_ui()

    def _build_ui(self):
        """Build the player view."""
        header = ft.Container(
            content=ft.Row(
                [
                    ft.Row(
                        [
                            ft.IconButton(
                                icon=ft.Icons.ARROW_BACK_ROUNDED,
                                icon_color=ft.Colors.WHITE70,
                                icon_size=24,
                                tooltip="Back",
                                on_click=lambda e: self._on_back and self._on_back(),
                            ),
                            ft.Column([self._name_text, self._group_text], spacing=2),
                        ],
                        spacing=12,
                    ),
                    ft.Row(
                        [
                            ft.IconButton(
                                icon=ft.Icons.SKIP_PREVIOUS_ROUNDED,
                                icon_color=ft.Colors.WHITE70,
                                tooltip="Previous",
                                on_click=lambda e: self._navigate(-1),
                            ),
                            ft.IconButton(
                                icon=ft.Icons.SKIP_NEXT_ROUNDED,
                                icon_color=ft.Colors.WHITE70,
                                tooltip="Next",
                                on_click=lambda e: self._navigate(1),
                            ),
                        ],
                        spacing=4,
                    ),
                ],
                alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
            ),
            padding=ft.padding.symmetric(horizontal=16, vertical=8),
            bgcolor="#1a1a2e",
        )

        self.content = ft.Column(
            [
                header,
                ft.Container(content=self._video_player, expand=True, bgcolor="#0a0a12"),
            ],
            expand=True,
            spacing=0,
        )
        self.expand = True
        self.bgcolor = "#0a0a12"

    def play_entry(self, entry: PlaylistEntry):
        """Start playing an entry."""
        self._state.select_entry(entry)
        self._name_text.value = entry.name
        self._group_text.value = entry.group
        self._video_player.play_entry(entry)

    def stop(self):
        """Stop playback and release the stream."""
        self._video_player.stop()

    def _navigate(self, delta: int):
        current = self._state.current_entry
        if current is None:
            return
        entry = self._state.neighbour(current, delta)
        if entry is not None and entry.id != current.id:
            self.play_entry(entry)
