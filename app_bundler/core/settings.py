"""
Manages bundler settings using a JSON file.
"""

import os
import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "APP_BUNDLER_CONFIG_DIR"

# Settings that must hold a positive integer
INTEGER_KEYS = ('icon-size', 'max-icon-bytes', 'max-workers')


class SettingsManager:
    """Handles loading and saving bundler settings to a JSON file."""

    def __init__(self, app_name: str = "app-bundler", config_dir=None):
        # Explicit argument, then environment, then ~/.config/app-bundler
        if config_dir is None:
            config_dir = os.environ.get(CONFIG_DIR_ENV) or Path.home() / ".config" / app_name
        config_dir = Path(config_dir)
        config_dir.mkdir(parents=True, exist_ok=True)
        self.settings_path = config_dir / "settings.json"
        self.settings = {}
        self._load()

    def _get_defaults(self) -> dict:
        """Returns the default settings."""
        return {
            'icon-size': 1024,
            'icon-color': "#3C5AB8",
            'max-icon-bytes': 32 * 1024 * 1024,
            'max-workers': 4,
        }

    def _load(self):
        """Loads settings from the JSON file."""
        try:
            with open(self.settings_path, 'r') as f:
                self.settings = json.load(f)
            if not isinstance(self.settings, dict):
                raise ValueError("settings root is not an object")
        except (FileNotFoundError, ValueError):
            # If file doesn't exist or is corrupted, start with defaults
            self.settings = self._get_defaults()
            self._save()

    def _save(self):
        """Saves the current settings to the JSON file."""
        try:
            with open(self.settings_path, 'w') as f:
                json.dump(self.settings, f, indent=4)
        except OSError as e:
            logger.warning("Could not save settings to %s: %s", self.settings_path, e)

    def get(self, key: str) -> Any:
        """Gets a setting value by key, falling back to default if not found or unusable."""
        default = self._get_defaults().get(key)
        if key not in self.settings:
            return default
        value = self._coerce(key, self.settings[key])
        if value is None:
            logger.warning("Ignoring invalid value %r for setting '%s', using %r",
                           self.settings[key], key, default)
            return default
        return value

    def _coerce(self, key: str, value: Any) -> Any:
        """Returns the value in the type the setting needs, or None if it has none."""
        if key in INTEGER_KEYS:
            # json true/false load as bool, an int subclass
            if isinstance(value, bool):
                return None
            if isinstance(value, str):
                try:
                    value = int(value.strip())
                except ValueError:
                    return None
            if not isinstance(value, int) or value <= 0:
                return None
            return value
        if key == 'icon-color' and not isinstance(value, str):
            return None
        return value

    def set(self, key: str, value: Any):
        """Sets a setting value by key and saves the file."""
        self.settings[key] = value
        self._save()
