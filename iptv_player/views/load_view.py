"""Load view - open a playlist from a URL or a local file."""
import logging
import flet as ft
from typing import Callable, Optional
from ..errors import PlayerError
from ..models.app_state import AppState
from ..models.playlist import ClassifiedPlaylist
from ..services.playlist_loader import PlaylistLoader

logger = logging.getLogger(__name__)


class LoadView(ft.Container):
    """First screen: asks for an M3U playlist."""

    def __init__(
        self,
        state: AppState,
        loader: PlaylistLoader,
        on_loaded: Optional[Callable[[ClassifiedPlaylist], None]] = None,
    ):
        super().__init__()
        self._state = state
        self._loader = loader
        self._on_loaded = on_loaded
        self._is_loading = False

        self._build_ui()

    def _build_ui(self):
        """Build the load view UI."""
        self._url_field = ft.TextField(
            hint_text="https://example.com/playlist.m3u",
            prefix_icon=ft.Icons.LINK_ROUNDED,
            border_radius=12,
            expand=True,
            bgcolor="#1a1a2e",
            color=ft.Colors.WHITE,
            on_submit=lambda e: self.page.run_task(self._load_from_url),
        )

        self._load_button = ft.ElevatedButton(
            text="Load",
            icon=ft.Icons.DOWNLOAD_ROUNDED,
            bgcolor=ft.Colors.PURPLE_700,
            color=ft.Colors.WHITE,
            on_click=lambda e: self.page.run_task(self._load_from_url),
        )

        self._progress_bar = ft.ProgressBar(width=400, color=ft.Colors.PURPLE_400, visible=False)
        self._progress_text = ft.Text("", color=ft.Colors.WHITE70, size=12, visible=False)
        self._status_text = ft.Text("", color=ft.Colors.WHITE70, size=12)

        self._file_picker = ft.FilePicker(on_result=self._on_file_picked)

        url_section = ft.Container(
            content=ft.Column(
                [
                    ft.Text("Load from URL", size=16, weight=ft.FontWeight.W_600, color=ft.Colors.WHITE),
                    ft.Container(height=12),
                    ft.Row([self._url_field, self._load_button], spacing=12),
                ],
            ),
            padding=ft.padding.all(20),
            border_radius=16,
            bgcolor=ft.Colors.with_opacity(0.3, ft.Colors.BLACK),
        )

        file_section = ft.Container(
            content=ft.Column(
                [
                    ft.Text("Load from File", size=16, weight=ft.FontWeight.W_600, color=ft.Colors.WHITE),
                    ft.Container(height=12),
                    ft.OutlinedButton(
                        text="Browse for M3U file...",
                        icon=ft.Icons.FOLDER_OPEN_ROUNDED,
                        style=ft.ButtonStyle(
                            color=ft.Colors.WHITE70,
                            side=ft.BorderSide(1, ft.Colors.WHITE24),
                        ),
                        on_click=lambda e: self._file_picker.pick_files(
                            allowed_extensions=["m3u", "m3u8"],
                            dialog_title="Select M3U Playlist",
                        ),
                    ),
                ],
            ),
            padding=ft.padding.all(20),
            border_radius=16,
            bgcolor=ft.Colors.with_opacity(0.3, ft.Colors.BLACK),
        )

        self.content = ft.Column(
            [
                ft.Row(
                    [
                        ft.Icon(ft.Icons.LIVE_TV_ROUNDED, size=32, color="#a78bfa"),
                        ft.Text(self._state.settings.app_name, size=28, weight=ft.FontWeight.BOLD),
                    ],
                    spacing=12,
                ),
                ft.Text("Load your M3U playlist to get started", size=14, color=ft.Colors.WHITE54),
                ft.Container(height=24),
                url_section,
                ft.Container(height=16),
                file_section,
                ft.Container(height=16),
                self._progress_bar,
                self._progress_text,
                self._status_text,
                ft.Text("Supported formats: M3U, M3U8", size=11, color=ft.Colors.WHITE38),
            ],
            width=560,
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
        )
        self.alignment = ft.alignment.center
        self.expand = True
        self.padding = 40
        self.bgcolor = "#0a0a0f"

    def did_mount(self):
        self.page.overlay.append(self._file_picker)
        self.page.update()

    def will_unmount(self):
        if self._file_picker in self.page.overlay:
            self.page.overlay.remove(self._file_picker)

    def _set_loading(self, loading: bool, message: str = ""):
        self._is_loading = loading
        self._progress_bar.visible = loading
        self._progress_bar.value = None
        self._load_button.disabled = loading
        self._progress_text.visible = loading
        self._progress_text.value = message
        if loading:
            self._status_text.value = ""
        if self.page:
            self.page.update()

    def _update_progress(self, downloaded: int, total: int):
        """Progress callback - called by the loader per chunk."""
        self._progress_bar.value = downloaded / total
        self._progress_text.value = f"Downloading... {int(downloaded * 100 / total)}%"
        if self.page:
            self.page.update()

    async def _load_from_url(self):
        if self._is_loading:
            return
        self._set_loading(True, "Connecting...")
        try:
            playlist = await self._loader.load_from_url(
                self._url_field.value or "",
                progress_callback=self._update_progress,
            )
        except PlayerError as ex:
            self._show_error(str(ex))
            return
        except Exception as ex:
            logger.exception("Unexpected failure while loading a playlist")
            self._show_error(f"Unexpected error: {ex}")
            return
        finally:
            self._set_loading(False)
        self._finish(playlist)

    async def _on_file_picked(self, e: ft.FilePickerResultEvent):
        """Handle file picker result."""
        if not e.files or self._is_loading:
            return
        self._set_loading(True, "Loading file...")
        try:
            playlist = await self._loader.load_from_file(e.files[0].path)
        except PlayerError as ex:
            self._show_error(str(ex))
            return
        except Exception as ex:
            logger.exception("Unexpected failure while loading a playlist")
            self._show_error(f"Unexpected error: {ex}")
            return
        finally:
            self._set_loading(False)
        self._finish(playlist)

    def _show_error(self, message: str):
        self._status_text.value = f"Error: {message}"
        self._status_text.color = ft.Colors.RED_300
        if self.page:
            self.page.update()

    def _finish(self, playlist: ClassifiedPlaylist):
        counts = playlist.counts()
        self._status_text.value = (
            f"✓ {counts['channel']} channels, {counts['movie']} movies, {counts['series']} series found"
        )
        self._status_text.color = ft.Colors.GREEN_300
        if self._on_loaded:
            self._on_loaded(playlist)
