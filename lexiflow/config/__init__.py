"""Configuration module for LexiFlow."""

from .settings import Config
from .themes import DEFAULT_THEME, THEME_CONFIG, get_theme
from .config_manager import SettingsManager

__all__ = [
    'Config',
    'DEFAULT_THEME',
    'THEME_CONFIG',
    'get_theme',
    'SettingsManager',
]
