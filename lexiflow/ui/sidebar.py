"""
Sidebar - Favorites, Recent Decks and Import
---------------------------------------------
"""

from typing import Callable

import flet as ft

from ..models import RecentDeck
from ..services import StudySessionStore
from .common import DesignTokens, show_confirm_dialog


class SidebarView:
    """Deck navigation column on the left of the window."""

    def __init__(
        self,
        page: ft.Page,
        store: StudySessionStore,
        dispatch: Callable,
        on_import: Callable[[str], None],
    ) -> None:
        """
        Args:
            page: Flet page instance
            store: Session store
            dispatch: App callback running a store action then refreshing the UI
            on_import: Called with a file path typed into the import field
        """
        self.page = page
        self.store = store
        self.dispatch = dispatch
        self.on_import = on_import

        self._favorites_tile = ft.ListTile(
            leading=ft.Icon(ft.Icons.STAR_ROUNDED, color=DesignTokens.ACCENT_STAR),
            title=ft.Text("Favorites"),
            on_click=lambda _: self.dispatch(self.store.enter_favorites),
        )
        self._favorites_count = ft.Text(size=12, color=DesignTokens.TEXT_TERTIARY)
        self._favorites_tile.trailing = self._favorites_count
        self._decks = ft.Column(spacing=2, scroll=ft.ScrollMode.AUTO, expand=True)
        self._path_field = ft.TextField(
            hint_text="Path to .csv or .txt",
            dense=True,
            on_submit=lambda e: self._submit_import(),
        )
        self._container = self._build_view()

    @property
    def container(self) -> ft.Container:
        """Get the main container for this view."""
        return self._container

    def _build_view(self) -> ft.Container:
        return ft.Container(
            content=ft.Column(
                controls=[
                    ft.Container(
                        content=ft.Row(
                            controls=[
                                ft.Icon(ft.Icons.AUTO_STORIES_ROUNDED, color=ft.Colors.INDIGO_200, size=28),
                                ft.Text("LexiFlow", size=20, weight=ft.FontWeight.BOLD, color=ft.Colors.WHITE),
                            ],
                            alignment=ft.MainAxisAlignment.CENTER,
                            spacing=10,
                        ),
                        padding=ft.Padding.only(top=20, bottom=10),
                    ),
                    ft.Divider(height=1, color=ft.Colors.WHITE10),
                    self._favorites_tile,
                    ft.Text("RECENT DECKS", size=11, color=DesignTokens.TEXT_TERTIARY),
                    self._decks,
                    ft.Divider(height=1, color=ft.Colors.WHITE10),
                    ft.Row(
                        controls=[
                            ft.Container(content=self._path_field, expand=True),
                            ft.IconButton(
                                icon=ft.Icons.FILE_UPLOAD_ROUNDED,
                                tooltip="Import",
                                on_click=lambda _: self._submit_import(),
                            ),
                        ],
                    ),
                ],
                spacing=DesignTokens.SPACING_SM,
            ),
            width=260,
            padding=DesignTokens.SPACING_MD,
            bgcolor="#161617",
        )

    def refresh(self) -> None:
        store = self.store
        self._favorites_count.value = str(store.favorites_count)
        self._favorites_tile.selected = store.studying_favorites
        self._favorites_tile.opacity = 1.0 if store.favorites_count or store.studying_favorites else 0.5
        self._decks.controls = [self._build_deck_tile(deck) for deck in store.recent_decks]

    def _build_deck_tile(self, deck: RecentDeck) -> ft.ListTile:
        is_active = deck.path == self.store.deck_path and not self.store.studying_favorites
        card_count = len(self.store.all_cards) if is_active else None

        return ft.ListTile(
            leading=ft.Icon(ft.Icons.STYLE_ROUNDED),
            title=ft.Text(deck.name, no_wrap=True),
            subtitle=ft.Text(f"{card_count} cards", size=11) if card_count is not None else None,
            selected=is_active,
            dense=True,
            on_click=lambda _, path=deck.path: self._open_deck(path),
            trailing=ft.PopupMenuButton(
                items=[
                    ft.PopupMenuItem(content=ft.Text("Edit"), on_click=lambda _, path=deck.path: self._edit_deck(path)),
                    ft.PopupMenuItem(content=ft.Text("Remove"), on_click=lambda _, d=deck: self._confirm_delete(d)),
                ],
            ),
        )

    def _open_deck(self, path: str) -> None:
        def open_deck() -> None:
            if self.store.studying_favorites:
                self.store.exit_favorites()
            if path != self.store.deck_path:
                self.store.load_from_path(path)

        self.dispatch(open_deck)

    def _edit_deck(self, path: str) -> None:
        def edit_deck() -> None:
            if self.store.studying_favorites:
                self.store.exit_favorites()
            if path != self.store.deck_path and not self.store.load_from_path(path):
                return
            self.store.enter_setup_mode()

        self.dispatch(edit_deck)

    def _confirm_delete(self, deck: RecentDeck) -> None:
        show_confirm_dialog(
            self.page,
            title="Delete Deck?",
            message=f"\"{deck.name}\" will be removed from recent decks. The file stays on disk.",
            confirm_text="Delete",
            on_confirm=lambda: self.dispatch(self.store.delete_deck, deck.path),
            destructive=True,
        )

    def _submit_import(self) -> None:
        path = (self._path_field.value or "").strip()
        if not path:
            return
        self._path_field.value = ""
        self.on_import(path)
