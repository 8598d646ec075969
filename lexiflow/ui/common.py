"""Shared design tokens and small UI helpers."""

from typing import Callable, Optional

import flet as ft


# =============================================================================
# DESIGN TOKENS
# =============================================================================
class DesignTokens:
    """Centralized design tokens for consistent styling."""
    # Colors - Deep dark theme
    BG_PRIMARY = "#121212"
    BG_SURFACE = "#1A1A1B"
    BG_CARD = "#242426"
    BG_ELEVATED = "#2D2D30"

    # Text colors
    TEXT_PRIMARY = "#FFFFFF"
    TEXT_SECONDARY = "#B3B3B3"
    TEXT_TERTIARY = "#808080"

    ACCENT_DANGER = "#E57373"
    ACCENT_SUCCESS = "#81C784"
    ACCENT_STAR = "#FFD54F"

    # Spacing
    SPACING_XS = 4
    SPACING_SM = 8
    SPACING_MD = 16
    SPACING_LG = 24

    # Border radius
    RADIUS_SM = 8
    RADIUS_MD = 12
    RADIUS_LG = 16


def show_snackbar(page: ft.Page, message: str, error: bool = False) -> None:
    """Show a snackbar notification, replacing any previous one."""
    snackbar = ft.SnackBar(
        content=ft.Row(
            controls=[
                ft.Icon(
                    ft.Icons.ERROR_OUTLINE if error else ft.Icons.CHECK_CIRCLE_OUTLINE,
                    color=DesignTokens.TEXT_PRIMARY,
                    size=20,
                ),
                ft.Text(message, color=DesignTokens.TEXT_PRIMARY, size=14),
            ],
            spacing=12,
        ),
        bgcolor=DesignTokens.ACCENT_DANGER if error else DesignTokens.ACCENT_SUCCESS,
        duration=3500,
    )
    for ctrl in list(page.overlay):
        if isinstance(ctrl, ft.SnackBar):
            page.overlay.remove(ctrl)
    page.overlay.append(snackbar)
    snackbar.open = True
    page.update()


def show_confirm_dialog(
    page: ft.Page,
    title: str,
    message: str,
    confirm_text: str,
    on_confirm: Callable[[], None],
    cancel_text: str = "Cancel",
    on_cancel: Optional[Callable[[], None]] = None,
    destructive: bool = False,
) -> None:
    """Modal yes/no dialog mounted on the page overlay."""
    def close() -> None:
        dialog.open = False
        page.update()
        if dialog in page.overlay:
            page.overlay.remove(dialog)

    def confirm(e) -> None:
        close()
        on_confirm()

    def cancel(e) -> None:
        close()
        if on_cancel:
            on_cancel()

    dialog = ft.AlertDialog(
        modal=True,
        title=ft.Text(title, weight=ft.FontWeight.W_600),
        content=ft.Text(message, size=14, color=DesignTokens.TEXT_SECONDARY),
        actions=[
            ft.TextButton(cancel_text, on_click=cancel),
            ft.ElevatedButton(
                confirm_text,
                on_click=confirm,
                style=ft.ButtonStyle(
                    bgcolor=DesignTokens.ACCENT_DANGER if destructive else ft.Colors.INDIGO_600,
                    color=DesignTokens.TEXT_PRIMARY,
                ),
            ),
        ],
        actions_alignment=ft.MainAxisAlignment.END,
    )

    page.overlay.append(dialog)
    dialog.open = True
    page.update()
