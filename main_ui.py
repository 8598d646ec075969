"""
LexiFlow: Flashcard Study App
-----------------------------

Flet desktop interface over the LexiFlow study session store.
"""

import sys
from pathlib import Path

# Ensure project root is on sys.path for absolute imports
_ROOT = Path(__file__).resolve().parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import flet as ft
from typing import Callable, Dict

from lexiflow.config import Config, SettingsManager
from lexiflow.services import FileImporter, StudySessionStore
from lexiflow.ui import (
    DesignTokens,
    ListModeView,
    SettingsView,
    SetupView,
    SidebarView,
    StudyView,
    show_snackbar,
)
from lexiflow.utils import setup_logger

logger = setup_logger("lexiflow.app", Config.LOG_LEVEL)


# =============================================================================
# MAIN APPLICATION
# =============================================================================

class LexiFlowApp:
    """Main application controller."""

    MODE_FLASHCARDS = "flashcards"
    MODE_LIST = "list"
    MODE_SETTINGS = "settings"

    def __init__(self, page: ft.Page) -> None:
        """
        Initialize the application.

        Args:
            page: Flet page instance
        """
        self.page = page
        self.store = StudySessionStore(SettingsManager())
        self.importer = FileImporter(self.store)
        self.mode = self.MODE_FLASHCARDS

        self._setup_page()
        self._init_views()
        self._build_ui()

        self.store.restore()
        self.refresh()

    def _setup_page(self) -> None:
        """Configure page settings and theme."""
        self.page.title = Config.APP_NAME
        self.page.theme_mode = ft.ThemeMode.DARK
        self.page.bgcolor = DesignTokens.BG_PRIMARY
        self.page.padding = 0
        self.page.spacing = 0
        self.page.window.min_width = 900
        self.page.window.min_height = 600
        self.page.window.width = 1200
        self.page.window.height = 800

    def _init_views(self) -> None:
        """Initialize all view containers."""
        self.sidebar = SidebarView(self.page, self.store, self.dispatch, self.import_file)
        self.setup_view = SetupView(self.page, self.store, self.dispatch)
        self.study_view = StudyView(self.page, self.store, self.dispatch)
        self.list_view = ListModeView(self.page, self.store, self.dispatch)
        self.settings_view = SettingsView(self.page, self.store, self.dispatch)

        self.mode_views: Dict[str, object] = {
            self.MODE_FLASHCARDS: self.study_view,
            self.MODE_LIST: self.list_view,
            self.MODE_SETTINGS: self.settings_view,
        }

        # Drag & drop of deck files
        self.page.on_drop = self._on_file_drop

    def _build_ui(self) -> None:
        """Build the main UI layout."""
        self.mode_selector = ft.SegmentedButton(
            segments=[
                ft.Segment(value=self.MODE_FLASHCARDS, label=ft.Text("Flashcards"), icon=ft.Icon(ft.Icons.STYLE_ROUNDED)),
                ft.Segment(value=self.MODE_LIST, label=ft.Text("List"), icon=ft.Icon(ft.Icons.LIST_ROUNDED)),
                ft.Segment(value=self.MODE_SETTINGS, label=ft.Text("Settings"), icon=ft.Icon(ft.Icons.SETTINGS_ROUNDED)),
            ],
            selected=[self.mode],
            on_change=lambda e: self._on_mode_change(next(iter(e.control.selected), self.MODE_FLASHCARDS)),
        )
        self.deck_title = ft.Text(size=20, weight=ft.FontWeight.BOLD, color=DesignTokens.TEXT_PRIMARY)
        self.shuffle_button = ft.IconButton(
            icon=ft.Icons.SHUFFLE_ROUNDED,
            tooltip="Shuffle",
            on_click=lambda _: self.dispatch(self.store.shuffle_active),
        )
        self.close_button = ft.IconButton(
            icon=ft.Icons.CLOSE_ROUNDED,
            tooltip="Close deck",
            on_click=lambda _: self.dispatch(self._close_deck),
        )

        header = ft.Row(
            controls=[
                self.deck_title,
                ft.Container(expand=True),
                self.mode_selector,
                self.shuffle_button,
                self.close_button,
            ],
            spacing=DesignTokens.SPACING_SM,
        )

        self.content_area = ft.Container(expand=True)
        main_area = ft.Container(
            content=ft.Column(controls=[header, self.content_area], expand=True),
            expand=True,
            padding=24,
            bgcolor=DesignTokens.BG_SURFACE,
        )

        self.page.add(
            ft.Row(
                controls=[
                    self.sidebar.container,
                    ft.VerticalDivider(width=1, color=ft.Colors.WHITE10),
                    main_area,
                ],
                spacing=0,
                expand=True,
            )
        )

    def _empty_state(self) -> ft.Container:
        return ft.Container(
            content=ft.Column(
                controls=[
                    ft.Icon(ft.Icons.UPLOAD_FILE_ROUNDED, size=64, color=DesignTokens.TEXT_TERTIARY),
                    ft.Text("Drop a CSV file here", size=22, weight=ft.FontWeight.W_600),
                    ft.Text(
                        "The first line holds the column names; pick term and definition columns next.",
                        size=13,
                        color=DesignTokens.TEXT_SECONDARY,
                    ),
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                alignment=ft.MainAxisAlignment.CENTER,
            ),
            expand=True,
            alignment=ft.Alignment(0, 0),
        )

    # =========================================================================
    # STATE → UI
    # =========================================================================

    def dispatch(self, action: Callable, *args) -> None:
        """Run a store action, persist what it changed, and redraw."""
        action(*args)
        self.store.persist()
        self.refresh()

    def refresh(self) -> None:
        store = self.store
        has_cards = bool(store.all_cards)

        self.deck_title.value = store.current_deck_name
        self.mode_selector.visible = has_cards and not store.is_setup_mode
        self.shuffle_button.visible = has_cards and not store.is_setup_mode and self.mode == self.MODE_FLASHCARDS
        self.close_button.visible = has_cards or store.is_setup_mode

        self.sidebar.refresh()
        if store.is_setup_mode:
            self.setup_view.refresh()
            self.content_area.content = self.setup_view.container
        elif not has_cards and self.mode != self.MODE_SETTINGS:
            self.content_area.content = self._empty_state()
        else:
            view = self.mode_views[self.mode]
            view.refresh()
            self.content_area.content = view.container

        self.page.update()

        if store.error_message:
            show_snackbar(self.page, store.error_message, error=True)
            store.clear_error()

    def _on_mode_change(self, mode: str) -> None:
        self.mode = mode
        self.refresh()

    def _close_deck(self) -> None:
        if self.store.is_setup_mode:
            self.setup_view.request_close()
        else:
            self.store.reset_to_empty()

    # =========================================================================
    # IMPORT
    # =========================================================================

    def import_file(self, path: str) -> None:
        """Single entry point for picked and dropped files."""
        self.page.run_task(self._import_async, path)

    async def _import_async(self, path: str) -> None:
        await self.importer.import_dropped(path)
        self.store.persist()
        self.refresh()

    def _on_file_drop(self, e) -> None:
        """Handle file drop events."""
        if e.data:
            self.import_file(e.data)


def main(page: ft.Page) -> None:
    """
    Main entry point for Flet application.

    Args:
        page: Flet page instance
    """
    try:
        LexiFlowApp(page)
    except Exception:
        import traceback
        logger.exception("UI failed to start")
        page.add(
            ft.Container(
                content=ft.Column(
                    controls=[
                        ft.Text("UI failed to start", size=20, weight=ft.FontWeight.BOLD, color=ft.Colors.RED_400),
                        ft.Container(
                            content=ft.Text(traceback.format_exc(), size=11, selectable=True, color=ft.Colors.WHITE70),
                            padding=10,
                            bgcolor=ft.Colors.with_opacity(0.08, ft.Colors.WHITE),
                            border_radius=8,
                        ),
                    ],
                    spacing=10,
                ),
                padding=20,
            )
        )
        page.update()


def run() -> None:
    """Console script entry point."""
    ft.run(main)


if __name__ == "__main__":
    run()
