"""
List View - Whole Deck With Per-Row Reveal
-------------------------------------------
"""

from typing import Callable

import flet as ft

from ..models import Card
from ..services import StudySessionStore
from .common import DesignTokens


class ListModeView:
    """Scrollable list of every card; tap a row to reveal its definition."""

    def __init__(self, page: ft.Page, store: StudySessionStore, dispatch: Callable) -> None:
        self.page = page
        self.store = store
        self.dispatch = dispatch

        self._search_field = ft.TextField(
            hint_text="Search cards",
            prefix_icon=ft.Icons.SEARCH_ROUNDED,
            width=320,
            dense=True,
            on_change=lambda e: self.dispatch(self.store.set_search_query, e.control.value),
        )
        self._list = ft.ListView(spacing=DesignTokens.SPACING_SM, expand=True)
        self._summary = ft.Text(size=12, color=DesignTokens.TEXT_TERTIARY)
        self._container = self._build_view()

    @property
    def container(self) -> ft.Container:
        """Get the main container for this view."""
        return self._container

    def _build_view(self) -> ft.Container:
        toolbar = ft.Row(
            controls=[
                self._search_field,
                ft.Container(expand=True),
                ft.TextButton("Reveal All", icon=ft.Icons.VISIBILITY_ROUNDED, on_click=lambda _: self.dispatch(self.store.reveal_all)),
                ft.TextButton("Hide All", icon=ft.Icons.VISIBILITY_OFF_ROUNDED, on_click=lambda _: self.dispatch(self.store.clear_all_reveals)),
                ft.TextButton("Shuffle", icon=ft.Icons.SHUFFLE_ROUNDED, on_click=lambda _: self.dispatch(self.store.shuffle_list_mode)),
                ft.TextButton("Reset Order", icon=ft.Icons.RESTART_ALT_ROUNDED, on_click=lambda _: self.dispatch(self.store.reset_list_order)),
            ],
            spacing=DesignTokens.SPACING_SM,
        )

        return ft.Container(
            content=ft.Column(
                controls=[toolbar, self._summary, self._list],
                spacing=DesignTokens.SPACING_MD,
                expand=True,
            ),
            expand=True,
            padding=10,
        )

    def refresh(self) -> None:
        cards = self.store.filtered_list_cards
        self._search_field.value = self.store.search_query
        self._summary.value = f"{len(cards)} of {len(self.store.list_mode_cards)} cards"
        self._list.controls = [self._build_row(card) for card in cards]

    def _build_row(self, card: Card) -> ft.Container:
        revealed = self.store.is_revealed(card)
        starred = self.store.is_starred(card)

        return ft.Container(
            content=ft.Row(
                controls=[
                    ft.Column(
                        controls=[
                            ft.Text(card.term, size=16, weight=ft.FontWeight.W_600, color=DesignTokens.TEXT_PRIMARY),
                            ft.Text(
                                card.definition if revealed else "Tap to reveal",
                                size=14,
                                color=DesignTokens.TEXT_SECONDARY if revealed else DesignTokens.TEXT_TERTIARY,
                                italic=not revealed,
                            ),
                        ],
                        spacing=DesignTokens.SPACING_XS,
                        expand=True,
                    ),
                    ft.IconButton(
                        icon=ft.Icons.STAR_ROUNDED if starred else ft.Icons.STAR_BORDER_ROUNDED,
                        icon_color=DesignTokens.ACCENT_STAR if starred else DesignTokens.TEXT_TERTIARY,
                        on_click=lambda _, cid=card.uuid: self.dispatch(self.store.toggle_star, cid),
                    ),
                ],
            ),
            padding=DesignTokens.SPACING_MD,
            border_radius=DesignTokens.RADIUS_MD,
            bgcolor=DesignTokens.BG_CARD,
            on_click=lambda _, cid=card.uuid: self.dispatch(self.store.toggle_reveal, cid),
        )
