"""Data models for LexiFlow."""

from .card import Card, ColumnRole, RecentDeck, TabularData, card_key

__all__ = [
    'Card',
    'ColumnRole',
    'RecentDeck',
    'TabularData',
    'card_key',
]
