"""
Study View - One Card at a Time
--------------------------------

Flip session over the store's active cards, with optional typed answers.
"""

from typing import Callable, Optional

import flet as ft

from ..services import StudySessionStore
from .common import DesignTokens


class StudyView:
    """Flashcard session view."""

    def __init__(self, page: ft.Page, store: StudySessionStore, dispatch: Callable) -> None:
        self.page = page
        self.store = store
        self.dispatch = dispatch

        self._progress = ft.ProgressBar(value=0, height=6, border_radius=3)
        self._counter = ft.Text(size=12, color=DesignTokens.TEXT_TERTIARY)
        self._card_text = ft.Text(size=30, weight=ft.FontWeight.W_600, text_align=ft.TextAlign.CENTER, color=ft.Colors.WHITE)
        self._card_hint = ft.Text(size=12, color=ft.Colors.WHITE70)
        self._star_button = ft.IconButton(on_click=lambda _: self._on_star())
        self._answer_field = ft.TextField(
            hint_text="Type answer...",
            width=420,
            on_change=lambda e: self._on_typing(e.control.value),
        )
        self._answer_feedback = ft.Text(size=14, color=DesignTokens.ACCENT_SUCCESS)
        self._typing_button = ft.TextButton(on_click=lambda _: self.dispatch(self.store.toggle_typing_mode))
        self._card_face: Optional[ft.Container] = None
        self._container = self._build_view()

    @property
    def container(self) -> ft.Container:
        """Get the main container for this view."""
        return self._container

    def _build_view(self) -> ft.Container:
        self._card_face = ft.Container(
            content=ft.Column(
                controls=[self._card_hint, self._card_text],
                alignment=ft.MainAxisAlignment.CENTER,
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                spacing=DesignTokens.SPACING_MD,
            ),
            width=560,
            height=320,
            padding=DesignTokens.SPACING_LG,
            border_radius=DesignTokens.RADIUS_LG,
            alignment=ft.Alignment(0, 0),
            on_click=lambda _: self.dispatch(self.store.flip),
        )

        navigation = ft.Row(
            controls=[
                ft.IconButton(
                    icon=ft.Icons.ARROW_BACK_ROUNDED,
                    icon_size=32,
                    on_click=lambda _: self.dispatch(self.store.previous_card),
                ),
                ft.IconButton(
                    icon=ft.Icons.ARROW_FORWARD_ROUNDED,
                    icon_size=32,
                    on_click=lambda _: self.dispatch(self.store.next_card),
                ),
            ],
            alignment=ft.MainAxisAlignment.CENTER,
            spacing=DesignTokens.SPACING_LG,
        )

        return ft.Container(
            content=ft.Column(
                controls=[
                    self._progress,
                    self._counter,
                    ft.Stack(
                        controls=[
                            self._card_face,
                            ft.Container(content=self._star_button, right=8, top=8),
                        ],
                    ),
                    self._answer_field,
                    self._answer_feedback,
                    navigation,
                    self._typing_button,
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                spacing=DesignTokens.SPACING_MD,
            ),
            expand=True,
            padding=10,
        )

    def refresh(self) -> None:
        store = self.store
        card = store.current_card
        total = len(store.active_cards)
        theme = store.theme

        self._progress.value = (store.current_index + 1) / total if total else 0
        self._progress.color = theme["accent"]
        self._counter.value = f"Card {store.current_index + 1} of {total}" if total else "No cards"

        self._card_face.gradient = ft.LinearGradient(
            begin=ft.Alignment(-1, -1),
            end=ft.Alignment(1, 1),
            colors=[theme["gradient_start"], theme["gradient_end"]],
        )

        if card is None:
            self._card_text.value = ""
            self._card_hint.value = ""
            self._star_button.visible = False
        else:
            # Flipped shows the back side of whichever side comes first
            show_term = store.is_term_first != store.is_flipped
            self._card_text.value = card.term if show_term else card.definition
            self._card_hint.value = "TERM" if show_term else "DEFINITION"
            starred = store.is_starred(card)
            self._star_button.visible = True
            self._star_button.icon = ft.Icons.STAR_ROUNDED if starred else ft.Icons.STAR_BORDER_ROUNDED
            self._star_button.icon_color = DesignTokens.ACCENT_STAR if starred else ft.Colors.WHITE70

        self._answer_field.visible = store.is_typing_mode
        self._answer_field.value = store.typing_input
        self._answer_field.border_color = DesignTokens.ACCENT_SUCCESS if store.is_correct else None
        self._answer_feedback.visible = store.is_typing_mode and store.is_correct
        self._answer_feedback.value = "Correct!"
        self._typing_button.content = "Typing: On" if store.is_typing_mode else "Typing: Off"

    def _on_star(self) -> None:
        card = self.store.current_card
        if card is not None:
            self.dispatch(self.store.toggle_star, card.uuid)

    def _on_typing(self, value: str) -> None:
        # No full refresh while typing so the field keeps focus
        self.store.set_typing_input(value)
        self._answer_field.border_color = DesignTokens.ACCENT_SUCCESS if self.store.is_correct else None
        self._answer_feedback.visible = self.store.is_correct
        self.page.update()
