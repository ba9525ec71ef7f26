"""
Settings Manager for ghost-docker-images
Manages client settings stored in JSON file
"""

import json
import os
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

APP_DIR = 'ghost-docker-images'

DEFAULT_SETTINGS = {
    'docker_host': '',
    'timeout': 60,
    'log_level': 'INFO',
}


class SettingsManager:
    """Manager for client settings"""

    # User settings file location
    @staticmethod
    def get_user_settings_path() -> str:
        """Get path to user settings file"""
        if os.name == 'nt':  # Windows
            base_dir = os.environ.get('APPDATA', os.path.expanduser('~'))
            data_dir = os.path.join(base_dir, APP_DIR)
        else:  # macOS, Linux
            data_dir = os.path.join(
                os.environ.get('XDG_DATA_HOME', os.path.expanduser('~/.local/share')),
                APP_DIR
            )

        return os.path.join(data_dir, 'settings.json')

    def __init__(self, settings_file: Optional[str] = None):
        """
        Initialize settings manager

        Args:
            settings_file: Settings file path (default: per-user data dir)
        """
        self.settings_file = settings_file or self.get_user_settings_path()
        self.settings: Dict[str, Any] = {}

        self.load()

    def load(self):
        """Load settings from user file, defaults fill missing keys"""
        self.settings = DEFAULT_SETTINGS.copy()

        if not os.path.exists(self.settings_file):
            logger.debug(f"No settings at {self.settings_file}, writing defaults")
            self.save()
            return

        try:
            with open(self.settings_file, 'r', encoding='utf-8') as f:
                loaded_settings = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading settings: {e}")
            return

        if not isinstance(loaded_settings, dict):
            logger.error(f"Ignoring settings file {self.settings_file}: not a JSON object")
            return

        self.settings.update(loaded_settings)
        self._check_values()
        logger.debug(f"Settings loaded from {self.settings_file}")

    def _check_values(self):
        """Replace unusable timeout and log level values with the defaults"""
        timeout = self.settings.get('timeout')
        if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0:
            logger.warning(f"Invalid timeout {timeout!r} in {self.settings_file}, using {DEFAULT_SETTINGS['timeout']}")
            self.settings['timeout'] = DEFAULT_SETTINGS['timeout']

        level = self.settings.get('log_level')
        if isinstance(level, str) and isinstance(logging.getLevelName(level.upper()), int):
            self.settings['log_level'] = level.upper()
        else:
            logger.warning(f"Invalid log level {level!r} in {self.settings_file}, using {DEFAULT_SETTINGS['log_level']}")
            self.settings['log_level'] = DEFAULT_SETTINGS['log_level']

    def save(self) -> bool:
        """Save settings to file"""
        try:
            os.makedirs(os.path.dirname(self.settings_file) or '.', exist_ok=True)
            with open(self.settings_file, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=4, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Error saving settings: {e}")
            return False

        logger.debug(f"Settings saved to {self.settings_file}")
        return True

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get setting value

        Args:
            key: Setting key
            default: Default value if key not found

        Returns:
            Setting value
        """
        return self.settings.get(key, default)

    def set(self, key: str, value: Any, save: bool = True):
        """
        Set setting value

        Args:
            key: Setting key
            value: Setting value
            save: Save to file immediately
        """
        self.settings[key] = value

        if save:
            self.save()

    def update(self, settings_dict: Dict[str, Any], save: bool = True):
        """Update multiple settings"""
        self.settings.update(settings_dict)

        if save:
            self.save()

    def reset_to_defaults(self, save: bool = True):
        """Reset all settings to defaults"""
        self.settings = DEFAULT_SETTINGS.copy()

        if save:
            self.save()
            logger.info("Settings reset to defaults")

    def get_all(self) -> Dict[str, Any]:
        """Get all settings"""
        return self.settings.copy()

    def docker_host(self) -> str:
        """Docker endpoint, DOCKER_HOST wins over the settings file"""
        return os.environ.get('DOCKER_HOST') or self.settings.get('docker_host') or ''
