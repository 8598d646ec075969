"""LexiFlow - CSV flashcard study app"""

__version__ = "1.0.0"
__author__ = "LexiFlow Team"

from .config import Config, SettingsManager, THEME_CONFIG
from .models import Card, ColumnRole, RecentDeck, TabularData
from .services import DeckRepository, FileImporter, StudySessionStore
from .utils import TabularParser

__all__ = [
    'Config',
    'SettingsManager',
    'THEME_CONFIG',
    'Card',
    'ColumnRole',
    'RecentDeck',
    'TabularData',
    'DeckRepository',
    'FileImporter',
    'StudySessionStore',
    'TabularParser',
]
