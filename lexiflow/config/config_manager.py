"""Persistent settings manager with JSON storage and environment fallback."""

import copy
import json
import os
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional

from ..utils.logger import setup_logger
from .settings import Config

logger = setup_logger(__name__)


class SettingsManager:
    """
    Manages cross-launch application state with JSON persistence.

    Values are loaded from a JSON file with fallback to environment
    variables. ``set`` persists immediately unless ``persist=False``.

    Usage:
        settings = SettingsManager()
        theme = settings.get("THEME_NAME", "Blue")
        settings.set("RECENT_DECKS", [...])
    """

    _instance: Optional["SettingsManager"] = None
    _lock: Lock = Lock()

    # Default values for all persisted keys
    DEFAULTS: Dict[str, Any] = {
        # Deck last open when the app was closed ("" = none)
        "LAST_DECK_PATH": "",
        # [{"path": ..., "name": ..., "last_opened": iso8601}, ...], newest first
        "RECENT_DECKS": [],
        # Favorites: content keys plus the materialized term/definition pairs
        "STARRED_CARD_KEYS": [],
        "STARRED_CARDS": [],
        # deck path -> ordered list of card keys
        "CUSTOM_CARD_ORDERS": {},
        "THEME_NAME": Config.DEFAULT_THEME,
    }

    def __new__(cls, settings_file: Optional[str] = None) -> "SettingsManager":
        """Singleton pattern to ensure only one instance exists."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    instance = super().__new__(cls)
                    instance._initialized = False
                    cls._instance = instance
        return cls._instance

    def __init__(self, settings_file: Optional[str] = None) -> None:
        """
        Initialize the settings manager.

        Args:
            settings_file: Path to the settings JSON file.
                          Defaults to Config.SETTINGS_FILE.
        """
        if getattr(self, "_initialized", False):
            return

        self._settings_file: Path = Path(settings_file or Config.SETTINGS_FILE)
        self._settings: Dict[str, Any] = {}
        self._file_lock: Lock = Lock()

        self._load_settings()
        self._initialized = True

    def _load_settings(self) -> None:
        """Load settings from JSON file with environment variable fallback."""
        self._settings = copy.deepcopy(self.DEFAULTS)

        if self._settings_file.exists():
            try:
                with open(self._settings_file, "r", encoding="utf-8") as f:
                    file_settings = json.load(f)
                if isinstance(file_settings, dict):
                    self._merge_file_settings(file_settings)
                else:
                    logger.warning("Ignoring settings file %s: not a JSON object", self._settings_file)
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Could not load settings file: %s", e)

        # Environment variables have the highest priority
        for key in self.DEFAULTS:
            env_value = os.environ.get(key)
            if env_value is not None:
                self._settings[key] = self._parse_env_value(env_value, key)

        self._save_settings()

    def _merge_file_settings(self, file_settings: Dict[str, Any]) -> None:
        """Take file values whose JSON type matches the default; others keep the default."""
        for key, value in file_settings.items():
            default = self.DEFAULTS.get(key)
            if default is not None and not isinstance(value, type(default)):
                logger.warning("Ignoring %s from settings file: expected %s", key, type(default).__name__)
                continue
            self._settings[key] = value

    def _parse_env_value(self, value: str, key: str) -> Any:
        """
        Parse environment variable value to appropriate type.

        Structured values (lists, mappings) are read as JSON; anything that
        fails to parse keeps the default.
        """
        default = self.DEFAULTS.get(key)

        if isinstance(default, bool):
            return value.lower() in ("true", "1", "yes", "on")
        elif isinstance(default, (list, dict)):
            try:
                parsed = json.loads(value)
            except json.JSONDecodeError:
                return copy.deepcopy(default)
            return parsed if isinstance(parsed, type(default)) else copy.deepcopy(default)
        else:
            return value

    def _save_settings(self) -> None:
        """Save current settings to JSON file."""
        with self._file_lock:
            try:
                self._settings_file.parent.mkdir(parents=True, exist_ok=True)
                temp_file = self._settings_file.with_suffix(".json.tmp")
                with open(temp_file, "w", encoding="utf-8") as f:
                    json.dump(self._settings, f, indent=2, ensure_ascii=False)
                os.replace(temp_file, self._settings_file)
            except OSError as e:
                logger.warning("Could not save settings file: %s", e)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value.

        Returns a deep copy for mutable objects (dict, list) to prevent
        accidental modification of internal state.
        """
        value = self._settings.get(key, default)
        if isinstance(value, (dict, list)):
            return copy.deepcopy(value)
        return value

    def set(self, key: str, value: Any, persist: bool = True) -> None:
        """
        Set a setting value and (by default) persist to disk.

        Args:
            key: The setting key
            value: The value to set (must be JSON serializable)
            persist: Write the file right away
        """
        self._settings[key] = value
        if persist:
            self._save_settings()

    def update(self, values: Dict[str, Any]) -> None:
        """Set several keys with a single write."""
        self._settings.update(values)
        self._save_settings()

    def reset(self, key: Optional[str] = None) -> None:
        """
        Reset settings to defaults.

        Args:
            key: Specific key to reset. If None, resets all settings.
        """
        if key is not None:
            if key in self.DEFAULTS:
                self._settings[key] = copy.deepcopy(self.DEFAULTS[key])
        else:
            self._settings = copy.deepcopy(self.DEFAULTS)

        self._save_settings()

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance. Useful for testing."""
        with cls._lock:
            cls._instance = None
