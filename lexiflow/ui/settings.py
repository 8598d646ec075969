"""
Settings View - Theme and Study Options
----------------------------------------
"""

from typing import Callable

import flet as ft

from ..config import THEME_CONFIG
from ..services import StudySessionStore
from .common import DesignTokens


class SettingsView:
    """Theme picker plus study direction options."""

    def __init__(self, page: ft.Page, store: StudySessionStore, dispatch: Callable) -> None:
        self.page = page
        self.store = store
        self.dispatch = dispatch

        self._theme_dropdown = ft.Dropdown(
            label="Theme",
            options=[ft.dropdown.Option(name) for name in THEME_CONFIG],
            width=300,
            on_select=lambda e: self.dispatch(self.store.set_theme, e.control.value),
        )
        self._term_first_switch = ft.Switch(
            label="Show term first",
            on_change=lambda e: self.dispatch(self.store.set_term_first, e.control.value),
        )
        self._deck_name_field = ft.TextField(
            label="Deck name",
            width=300,
            on_submit=lambda e: self.dispatch(self.store.rename_current_deck, e.control.value.strip()),
        )
        self._container = self._build_view()

    @property
    def container(self) -> ft.Container:
        """Get the main container for this view."""
        return self._container

    def _build_section_card(self, title: str, icon: str, controls: list) -> ft.Container:
        """Build a styled section card."""
        return ft.Container(
            content=ft.Column(
                controls=[
                    ft.Row(
                        controls=[
                            ft.Icon(icon, size=20, color=ft.Colors.INDIGO_200),
                            ft.Text(title, size=16, weight=ft.FontWeight.BOLD, color=ft.Colors.WHITE),
                        ],
                        spacing=10,
                    ),
                    ft.Divider(height=1, color=ft.Colors.WHITE10),
                    *controls,
                ],
                spacing=10,
            ),
            padding=20,
            border_radius=DesignTokens.RADIUS_MD,
            bgcolor="#1A1A1A",
        )

    def _build_view(self) -> ft.Container:
        return ft.Container(
            content=ft.Column(
                controls=[
                    ft.Text("Settings", size=28, weight=ft.FontWeight.BOLD, color=ft.Colors.WHITE),
                    self._build_section_card("Appearance", ft.Icons.PALETTE_ROUNDED, [self._theme_dropdown]),
                    self._build_section_card("Study", ft.Icons.SCHOOL_ROUNDED, [self._term_first_switch]),
                    self._build_section_card("Deck", ft.Icons.STYLE_ROUNDED, [self._deck_name_field]),
                ],
                spacing=DesignTokens.SPACING_LG,
                scroll=ft.ScrollMode.AUTO,
                expand=True,
            ),
            expand=True,
            padding=10,
        )

    def refresh(self) -> None:
        self._theme_dropdown.value = self.store.theme_name
        self._term_first_switch.value = self.store.is_term_first
        self._deck_name_field.value = self.store.current_deck_name
        self._deck_name_field.disabled = not self.store.deck_path or self.store.studying_favorites
