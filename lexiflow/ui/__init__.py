"""UI components for LexiFlow."""

from .common import DesignTokens, show_confirm_dialog, show_snackbar
from .list_mode import ListModeView
from .settings import SettingsView
from .setup_editor import SetupView
from .sidebar import SidebarView
from .study import StudyView

__all__ = [
    'DesignTokens',
    'show_confirm_dialog',
    'show_snackbar',
    'ListModeView',
    'SettingsView',
    'SetupView',
    'SidebarView',
    'StudyView',
]
