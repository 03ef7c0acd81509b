"""Entry list component with content tabs, search and group chips."""
import flet as ft
from typing import Callable, List, Optional
from ..models.entry import ContentKind, PlaylistEntry
from ..models.playlist import ClassifiedPlaylist


KIND_TABS = [
    (ContentKind.CHANNEL, "Live TV", ft.Icons.LIVE_TV_ROUNDED),
    (ContentKind.MOVIE, "Movies", ft.Icons.MOVIE_ROUNDED),
    (ContentKind.SERIES, "Series", ft.Icons.TV_ROUNDED),
]

KIND_ICONS = {kind: icon for kind, _, icon in KIND_TABS}


class EntryList(ft.Container):
    """Browsable list of one playlist bucket, paged for large playlists."""

    MAX_GROUP_CHIPS = 15

    def __init__(
        self,
        page_size: int = 50,
        on_entry_select: Optional[Callable[[PlaylistEntry], None]] = None,
    ):
        super().__init__()
        self._page_size = page_size
        self._on_entry_select = on_entry_select
        self._playlist = ClassifiedPlaylist()
        self._kind = ContentKind.CHANNEL
        self._filtered: List[PlaylistEntry] = []
        self._displayed_count = 0
        self._selected_group: Optional[str] = None
        self._search_query = ""

        self._build_ui()

    def _build_ui(self):
        """Build the entry list UI."""
        self._search_field = ft.TextField(
            hint_text="Search...",
            prefix_icon=ft.Icons.SEARCH_ROUNDED,
            border_radius=30,
            height=48,
            text_size=14,
            content_padding=ft.padding.only(left=12, right=12),
            border_color=ft.Colors.TRANSPARENT,
            focused_border_color=ft.Colors.PURPLE_400,
            bgcolor="#1a1a2e",
            hint_style=ft.TextStyle(color=ft.Colors.WHITE38),
            color=ft.Colors.WHITE,
            on_submit=self._on_search_submit,
        )

        self._kind_tabs = ft.Row(scroll=ft.ScrollMode.AUTO, spacing=6)
        self._group_chips = ft.Row(scroll=ft.ScrollMode.AUTO, spacing=8)

        self._list_view = ft.ListView(
            spacing=4,
            padding=ft.padding.only(top=8, bottom=8),
            expand=True,
        )

        self._load_more_btn = ft.Container(
            content=ft.ElevatedButton(
                text="Load More",
                icon=ft.Icons.EXPAND_MORE_ROUNDED,
                bgcolor=ft.Colors.PURPLE_700,
                color=ft.Colors.WHITE,
                on_click=self._load_more,
            ),
            alignment=ft.alignment.center,
            padding=ft.padding.symmetric(vertical=12),
            visible=False,
        )

        self._count_text = ft.Text("", size=12, color=ft.Colors.WHITE38)
        self._empty_text = ft.Text(
            "Nothing here",
            size=14,
            color=ft.Colors.WHITE38,
            italic=True,
            visible=False,
        )

        self.content = ft.Column(
            [
                ft.Row(
                    [self._kind_tabs, self._count_text],
                    alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                ),
                ft.Container(height=12),
                ft.Row(
                    [
                        ft.Container(content=self._search_field, expand=True),
                        ft.IconButton(
                            icon=ft.Icons.SEARCH_ROUNDED,
                            icon_color=ft.Colors.WHITE70,
                            on_click=self._on_search_submit,
                        ),
                    ],
                    spacing=8,
                ),
                ft.Container(
                    content=self._group_chips,
                    padding=ft.padding.symmetric(vertical=12),
                ),
                ft.Container(height=1, bgcolor=ft.Colors.with_opacity(0.1, ft.Colors.WHITE)),
                self._empty_text,
                ft.Container(
                    content=ft.Column([self._list_view, self._load_more_btn], spacing=0),
                    expand=True,
                ),
            ],
            spacing=0,
            expand=True,
        )
        self.padding = ft.padding.all(20)
        self.expand = True

    def set_playlist(self, playlist: ClassifiedPlaylist):
        """Show a newly loaded playlist, starting on the first non-empty tab."""
        self._playlist = playlist
        counts = playlist.counts()
        self._kind = next(
            (kind for kind, _, _ in KIND_TABS if counts[kind.value]),
            ContentKind.CHANNEL,
        )
        self._reset_filters()

    def _reset_filters(self):
        self._selected_group = None
        self._search_query = ""
        self._search_field.value = ""
        self._update_kind_tabs()
        self._update_group_chips()
        self._apply_filters()

    def _update_kind_tabs(self):
        counts = self._playlist.counts()
        self._kind_tabs.controls = [
            self._create_kind_tab(kind, f"{label} ({counts[kind.value]})", icon)
            for kind, label, icon in KIND_TABS
        ]

    def _create_kind_tab(self, kind: ContentKind, label: str, icon) -> ft.Control:
        is_selected = self._kind == kind
        color = ft.Colors.WHITE if is_selected else ft.Colors.WHITE54
        return ft.Container(
            content=ft.Row(
                [ft.Icon(icon, size=16, color=color), ft.Text(label, size=12, color=color)],
                spacing=6,
            ),
            padding=ft.padding.symmetric(horizontal=12, vertical=8),
            border_radius=20,
            bgcolor=ft.Colors.PURPLE_700 if is_selected else "#1a1a2e",
            on_click=lambda e, k=kind: self._select_kind(k),
        )

    def _select_kind(self, kind: ContentKind):
        self._kind = kind
        self._reset_filters()

    def _update_group_chips(self):
        groups = self._playlist.get_groups(self._kind)
        chips = [self._create_chip("All", None)]
        for group in groups[:self.MAX_GROUP_CHIPS]:
            display_name = group[:16] + "..." if len(group) > 16 else group
            chips.append(self._create_chip(display_name, group))

        if len(groups) > self.MAX_GROUP_CHIPS:
            chips.append(
                ft.Container(
                    content=ft.Text(
                        f"+{len(groups) - self.MAX_GROUP_CHIPS} more",
                        size=12,
                        color=ft.Colors.WHITE38,
                    ),
                    padding=ft.padding.symmetric(horizontal=12, vertical=8),
                )
            )
        self._group_chips.controls = chips

    def _create_chip(self, label: str, group: Optional[str]) -> ft.Control:
        is_selected = self._selected_group == group
        return ft.Container(
            content=ft.Text(label, size=13, color=ft.Colors.WHITE if is_selected else ft.Colors.WHITE70),
            padding=ft.padding.symmetric(horizontal=16, vertical=8),
            border_radius=20,
            bgcolor=ft.Colors.PURPLE_700 if is_selected else "#1a1a2e",
            on_click=lambda e, g=group: self._select_group(g),
        )

    def _select_group(self, group: Optional[str]):
        self._selected_group = group
        self._update_group_chips()
        self._apply_filters()

    def _on_search_submit(self, e):
        self._search_query = self._search_field.value or ""
        self._apply_filters()

    def _apply_filters(self):
        self._filtered = self._playlist.filter(self._kind, self._search_query, self._selected_group)
        self._list_view.controls.clear()
        self._displayed_count = 0
        self._append_page()

        self._count_text.value = f"{len(self._filtered)} items"
        self._empty_text.visible = not self._filtered
        if self.page:
            self.page.update()

    def _append_page(self):
        start = self._displayed_count
        end = min(start + self._page_size, len(self._filtered))
        for entry in self._filtered[start:end]:
            self._list_view.controls.append(self._build_entry_tile(entry))
        self._displayed_count = end
        self._load_more_btn.visible = self._displayed_count < len(self._filtered)

    def _load_more(self, e):
        self._append_page()
        if self.page:
            self.page.update()

    def _build_entry_tile(self, entry: PlaylistEntry) -> ft.Control:
        """Build a list tile with logo, name and group."""
        fallback_icon = ft.Icon(KIND_ICONS[entry.kind], color=ft.Colors.WHITE54, size=18)
        if entry.logo_url:
            logo_content = ft.Image(
                src=entry.logo_url,
                width=32,
                height=32,
                fit=ft.ImageFit.CONTAIN,
                error_content=fallback_icon,
            )
        else:
            logo_content = fallback_icon

        display_name = entry.name[:45] + "..." if len(entry.name) > 45 else entry.name

        return ft.Container(
            content=ft.Row(
                [
                    ft.Container(
                        content=logo_content,
                        width=44,
                        height=44,
                        border_radius=10,
                        bgcolor="#1a1a2e",
                        alignment=ft.alignment.center,
                    ),
                    ft.Container(width=10),
                    ft.Column(
                        [
                            ft.Text(
                                display_name,
                                size=13,
                                weight=ft.FontWeight.W_500,
                                color=ft.Colors.WHITE,
                                max_lines=1,
                            ),
                            ft.Text(entry.group, size=11, color=ft.Colors.WHITE38, max_lines=1),
                        ],
                        spacing=2,
                        expand=True,
                        alignment=ft.MainAxisAlignment.CENTER,
                    ),
                    ft.Icon(ft.Icons.PLAY_ARROW_ROUNDED, color=ft.Colors.WHITE24, size=20),
                ],
                vertical_alignment=ft.CrossAxisAlignment.CENTER,
            ),
            padding=ft.padding.symmetric(horizontal=12, vertical=8),
            border_radius=12,
            on_click=lambda e, en=entry: self._select_entry(en),
        )

    def _select_entry(self, entry: PlaylistEntry):
        if self._on_entry_select:
            self._on_entry_select(entry)
