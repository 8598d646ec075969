"""
Setup View - Column Mapping and Table Editing
----------------------------------------------

Shown right after an import (or on "Edit deck"): pick the term and
definition columns, fix cells, add or delete rows and columns, then save
and generate the cards.
"""

from typing import Callable, List, Optional

import flet as ft

from ..models import ColumnRole
from ..services import StudySessionStore
from .common import DesignTokens, show_confirm_dialog


class SetupView:
    """Raw table editor bound to the session store."""

    CELL_WIDTH = 180

    def __init__(self, page: ft.Page, store: StudySessionStore, dispatch: Callable) -> None:
        """
        Args:
            page: Flet page instance for updates
            store: Session store holding the table
            dispatch: App callback running a store action then refreshing the UI
        """
        self.page = page
        self.store = store
        self.dispatch = dispatch

        self._term_dropdown: Optional[ft.Dropdown] = None
        self._definition_dropdown: Optional[ft.Dropdown] = None
        self._table_column = ft.Column(spacing=6, scroll=ft.ScrollMode.AUTO, expand=True)
        self._container = self._build_view()

    @property
    def container(self) -> ft.Container:
        """Get the main container for this view."""
        return self._container

    def _build_view(self) -> ft.Container:
        self._term_dropdown = ft.Dropdown(
            label="Term",
            width=220,
            on_select=lambda e: self._on_mapping_change(ColumnRole.TERM, e.control.value),
        )
        self._definition_dropdown = ft.Dropdown(
            label="Definition",
            width=220,
            on_select=lambda e: self._on_mapping_change(ColumnRole.DEFINITION, e.control.value),
        )

        toolbar = ft.Row(
            controls=[
                self._term_dropdown,
                self._definition_dropdown,
                ft.IconButton(
                    icon=ft.Icons.AUTO_FIX_HIGH_ROUNDED,
                    tooltip="Detect columns from headers",
                    on_click=lambda _: self.dispatch(self.store.auto_detect_columns),
                ),
                ft.Container(expand=True),
                ft.TextButton("Add Row", icon=ft.Icons.ADD_ROUNDED, on_click=lambda _: self.dispatch(self.store.add_row)),
                ft.TextButton("Cancel", on_click=lambda _: self.request_close()),
                ft.ElevatedButton(
                    "Save & Generate",
                    icon=ft.Icons.SAVE_ROUNDED,
                    on_click=lambda _: self.dispatch(self.store.save_and_generate),
                ),
            ],
            spacing=DesignTokens.SPACING_MD,
            vertical_alignment=ft.CrossAxisAlignment.END,
        )

        return ft.Container(
            content=ft.Column(
                controls=[
                    ft.Text("Set up your deck", size=24, weight=ft.FontWeight.BOLD, color=DesignTokens.TEXT_PRIMARY),
                    ft.Text(
                        "Choose which columns hold the term and the definition.",
                        size=13,
                        color=DesignTokens.TEXT_SECONDARY,
                    ),
                    toolbar,
                    ft.Divider(height=1, color=ft.Colors.WHITE10),
                    self._table_column,
                ],
                spacing=DesignTokens.SPACING_MD,
                expand=True,
            ),
            expand=True,
            padding=10,
        )

    def refresh(self) -> None:
        """Rebuild the editor from the store's table."""
        table = self.store.table
        if table is None:
            self._table_column.controls = []
            return

        options = [ft.dropdown.Option(key=str(i), text=header or f"Column {i + 1}") for i, header in enumerate(table.headers)]
        self._term_dropdown.options = options
        self._term_dropdown.value = str(self.store.term_column)
        self._definition_dropdown.options = list(options)
        self._definition_dropdown.value = str(self.store.definition_column)

        rows: List[ft.Control] = [self._build_header_row(table.headers)]
        for row_index, row in enumerate(table.rows):
            rows.append(self._build_data_row(row_index, row))
        self._table_column.controls = rows

    def _build_header_row(self, headers: List[str]) -> ft.Row:
        cells = []
        for col, header in enumerate(headers):
            cells.append(
                ft.Row(
                    controls=[
                        ft.TextField(
                            value=header,
                            width=self.CELL_WIDTH - 40,
                            text_style=ft.TextStyle(weight=ft.FontWeight.BOLD),
                            on_change=lambda e, c=col: self.store.set_header(c, e.control.value),
                        ),
                        ft.IconButton(
                            icon=ft.Icons.DELETE_OUTLINE,
                            icon_color=DesignTokens.ACCENT_DANGER,
                            tooltip="Delete column",
                            on_click=lambda _, c=col: self.dispatch(self.store.delete_column, c),
                        ),
                    ],
                    spacing=0,
                    width=self.CELL_WIDTH,
                )
            )
        return ft.Row(controls=cells, spacing=DesignTokens.SPACING_SM)

    def _build_data_row(self, row_index: int, row: List[str]) -> ft.Row:
        cells: List[ft.Control] = [
            ft.TextField(
                value=value,
                width=self.CELL_WIDTH,
                dense=True,
                on_change=lambda e, r=row_index, c=col: self.store.set_cell(r, c, e.control.value),
            )
            for col, value in enumerate(row)
        ]
        cells.append(
            ft.IconButton(
                icon=ft.Icons.REMOVE_CIRCLE_OUTLINE,
                icon_color=DesignTokens.TEXT_TERTIARY,
                tooltip="Delete row",
                on_click=lambda _, r=row_index: self.dispatch(self.store.delete_row, r),
            )
        )
        return ft.Row(controls=cells, spacing=DesignTokens.SPACING_SM)

    def _on_mapping_change(self, role: ColumnRole, value: Optional[str]) -> None:
        if value is None:
            return
        self.dispatch(self.store.remap_column, role, int(value))

    def request_close(self) -> None:
        """Leave the editor, asking first when there are unsaved edits."""
        if not self.store.needs_save_prompt:
            self.dispatch(self.store.exit_setup_mode)
            return

        show_confirm_dialog(
            self.page,
            title="Unsaved changes",
            message="Save your edits to the deck file before leaving?",
            confirm_text="Save",
            on_confirm=lambda: self.dispatch(self.store.save_and_generate),
            cancel_text="Discard",
            on_cancel=lambda: self.dispatch(self.store.discard_changes),
        )
