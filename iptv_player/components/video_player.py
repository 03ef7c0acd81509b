"""Video player component for IPTV streams."""
import logging
import flet as ft
import flet_video as fv
from typing import Callable, Optional, Tuple
from ..config import Settings
from ..models.entry import PlaylistEntry
from ..services.playback_session import DetachFn, LoadState, PlaybackSession, track_progress

logger = logging.getLogger(__name__)


def attach_flet_video(url: str, video: fv.Video) -> DetachFn:
    """Load a stream into a Flet video element as its only playlist item.

    The underlying player handles HLS (.m3u8) as well as progressive
    streams, so segmented sources need no separate streaming library.
    """
    # The previous session removed its item when it closed
    video.stop()
    video.playlist_add(fv.VideoMedia(resource=url))
    video.jump_to(0)

    def detach():
        try:
            video.stop()
            video.playlist_remove(0)
        except Exception as e:
            logger.debug("Detach of %s failed: %s", url, e)

    return detach


class FletMediaHandle:
    """Adapts a Flet video element to the controls a session drives."""

    def __init__(self, video: fv.Video):
        self._video = video

    def play(self):
        self._video.play()

    def pause(self):
        self._video.pause()

    def seek(self, seconds: float):
        self._video.seek(int(seconds * 1000))

    def set_volume(self, level: float):
        # Flet volume is 0-100
        self._video.volume = level * 100
        if self._video.page:
            self._video.update()

    async def query_progress(self) -> Tuple[float, float]:
        # Both getters report milliseconds, or None before the media opens
        position = await self._video.get_current_position_async()
        duration = await self._video.get_duration_async()
        return (position or 0) / 1000, (duration or 0) / 1000


class VideoPlayerComponent(ft.Column):
    """Video element plus controls, driving one playback session at a time."""

    PROGRESS_INTERVAL = 1.0

    def __init__(
        self,
        settings: Settings,
        on_error: Optional[Callable[[str], None]] = None,
    ):
        super().__init__()
        self._settings = settings
        self._on_error = on_error
        self._session: Optional[PlaybackSession] = None
        self._entry: Optional[PlaylistEntry] = None
        self._error_reported = False
        self._volume = settings.default_volume

        self._build_ui()

    @property
    def session(self) -> Optional[PlaybackSession]:
        return self._session

    def _build_ui(self):
        """Build the video player UI."""
        self._video = fv.Video(
            expand=True,
            fill_color="#000000",
            aspect_ratio=16/9,
            volume=self._volume * 100,
            autoplay=False,
            filter_quality=ft.FilterQuality.HIGH,
            show_controls=False,
            fit=ft.ImageFit.CONTAIN,
            on_loaded=self._on_video_loaded,
            on_error=self._on_video_error,
            on_completed=self._on_video_completed,
        )

        self._play_btn = ft.IconButton(
            icon=ft.Icons.PLAY_ARROW_ROUNDED,
            icon_color=ft.Colors.WHITE,
            icon_size=28,
            tooltip="Play/Pause",
            on_click=lambda e: self._session and self._session.toggle_play(),
        )

        self._position_slider = ft.Slider(
            min=0,
            max=1,
            value=0,
            expand=True,
            active_color=ft.Colors.PURPLE_400,
            thumb_color=ft.Colors.PURPLE_200,
            on_change_end=self._on_seek,
        )
        self._time_text = ft.Text("0:00 / 0:00", size=12, color=ft.Colors.WHITE70)

        self._mute_btn = ft.IconButton(
            icon=ft.Icons.VOLUME_UP_ROUNDED,
            icon_color=ft.Colors.WHITE70,
            icon_size=20,
            tooltip="Mute",
            on_click=lambda e: self._session and self._session.toggle_mute(),
        )

        # Volume control (0-100 for app)
        self._volume_slider = ft.Slider(
            min=0,
            max=100,
            value=self._volume * 100,
            width=100,
            active_color=ft.Colors.PURPLE_400,
            thumb_color=ft.Colors.PURPLE_200,
            on_change=self._on_volume_change,
        )

        skip = self._settings.skip_seconds
        controls_bar = ft.Container(
            content=ft.Row(
                [
                    ft.IconButton(
                        icon=ft.Icons.REPLAY_10_ROUNDED,
                        icon_color=ft.Colors.WHITE70,
                        tooltip=f"Back {skip:g}s",
                        on_click=lambda e: self._session and self._session.skip(-skip),
                    ),
                    self._play_btn,
                    ft.IconButton(
                        icon=ft.Icons.FORWARD_10_ROUNDED,
                        icon_color=ft.Colors.WHITE70,
                        tooltip=f"Forward {skip:g}s",
                        on_click=lambda e: self._session and self._session.skip(skip),
                    ),
                    self._position_slider,
                    self._time_text,
                    self._mute_btn,
                    self._volume_slider,
                    ft.IconButton(
                        icon=ft.Icons.FULLSCREEN_ROUNDED,
                        icon_color=ft.Colors.WHITE70,
                        icon_size=24,
                        tooltip="Fullscreen",
                        on_click=lambda e: self._session and self._session.toggle_fullscreen(),
                    ),
                ],
                vertical_alignment=ft.CrossAxisAlignment.CENTER,
            ),
            padding=ft.padding.symmetric(horizontal=16, vertical=8),
            bgcolor="#1a1a2e",
            border_radius=10,
        )

        self._loading_indicator = ft.Container(
            content=ft.Column(
                [
                    ft.ProgressRing(width=60, height=60, stroke_width=4, color=ft.Colors.PURPLE_400),
                    ft.Container(height=16),
                    ft.Text("Loading stream...", color=ft.Colors.WHITE70, size=14),
                ],
                alignment=ft.MainAxisAlignment.CENTER,
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            ),
            alignment=ft.alignment.center,
            expand=True,
            bgcolor="#0a0a12",
            visible=False,
        )

        self._error_text = ft.Text("", color=ft.Colors.RED_300, size=14, text_align=ft.TextAlign.CENTER)
        self._error_overlay = ft.Container(
            content=ft.Column(
                [
                    ft.Icon(ft.Icons.ERROR_OUTLINE_ROUNDED, size=60, color=ft.Colors.RED_300),
                    ft.Container(height=12),
                    self._error_text,
                    ft.Container(height=12),
                    ft.OutlinedButton(
                        text="Retry",
                        icon=ft.Icons.REFRESH_ROUNDED,
                        on_click=lambda e: self._retry(),
                    ),
                ],
                alignment=ft.MainAxisAlignment.CENTER,
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            ),
            alignment=ft.alignment.center,
            expand=True,
            bgcolor="#0a0a12",
            visible=False,
        )

        self._video_container = ft.Container(
            content=self._video,
            expand=True,
            bgcolor="#000000",
            clip_behavior=ft.ClipBehavior.HARD_EDGE,
        )

        self.controls = [
            ft.Stack(
                [self._video_container, self._loading_indicator, self._error_overlay],
                expand=True,
            ),
            controls_bar,
        ]
        self.expand = True
        self.spacing = 0
        self.horizontal_alignment = ft.CrossAxisAlignment.STRETCH

    def play_entry(self, entry: PlaylistEntry):
        """Start a fresh session for an entry, closing the previous one."""
        self.stop()
        self._entry = entry
        self._error_reported = False

        session = PlaybackSession(
            entry.stream_url,
            attach=attach_flet_video,
            request_fullscreen=self._request_fullscreen,
            volume=self._volume,
        )
        session.add_listener(self._on_session_change)
        self._session = session

        media = FletMediaHandle(self._video)
        session.mount(media)
        if self._settings.autoplay:
            session.play()

        # Ready is signalled by on_loaded or by the first progress report
        if self.page and session.load_state == LoadState.LOADING:
            self.page.run_task(track_progress, session, media, self.PROGRESS_INTERVAL)

    def stop(self):
        """Close the current session and release its stream."""
        if self._session is not None:
            self._session.close()
            self._session = None
        self._loading_indicator.visible = False
        self._error_overlay.visible = False
        if self.page:
            self.page.update()

    def _retry(self):
        # A session in error is never reused
        if self._entry is not None:
            self.play_entry(self._entry)

    def _on_session_change(self, session: PlaybackSession):
        self._volume = session.volume
        self._loading_indicator.visible = session.load_state == LoadState.LOADING
        self._error_overlay.visible = session.load_state == LoadState.ERROR
        self._error_text.value = session.error_message or ""

        self._play_btn.icon = ft.Icons.PAUSE_ROUNDED if session.playing else ft.Icons.PLAY_ARROW_ROUNDED
        self._mute_btn.icon = ft.Icons.VOLUME_OFF_ROUNDED if session.muted else ft.Icons.VOLUME_UP_ROUNDED
        self._volume_slider.value = session.effective_volume * 100

        self._position_slider.max = max(session.duration_seconds, 1)
        self._position_slider.value = min(session.position_seconds, self._position_slider.max)
        self._time_text.value = (
            f"{self._format_time(session.position_seconds)} / {self._format_time(session.duration_seconds)}"
        )

        if session.load_state == LoadState.ERROR and not self._error_reported:
            self._error_reported = True
            if self._on_error:
                self._on_error(session.error_message or "Failed to load stream")

        if self.page:
            self.page.update()

    def _on_seek(self, e):
        if self._session:
            self._session.seek(float(e.control.value))

    def _on_volume_change(self, e):
        """Handle app volume change."""
        if self._session:
            self._session.set_volume(float(e.control.value) / 100)
        else:
            self._volume = float(e.control.value) / 100

    def _request_fullscreen(self, fullscreen: bool):
        if self.page:
            self.page.window.full_screen = fullscreen
            self.page.update()

    def _on_video_loaded(self, e):
        logger.debug("Video element loaded: %s", e.data)
        if self._session:
            self._session.on_can_play()

    def _on_video_error(self, e):
        """Handle video error event."""
        if self._session:
            self._session.on_media_error(e.data or "Failed to load stream")

    def _on_video_completed(self, e):
        if self._session:
            self._session.pause()

    @staticmethod
    def _format_time(seconds: float) -> str:
        minutes, secs = divmod(int(seconds), 60)
        return f"{minutes}:{secs:02d}"
