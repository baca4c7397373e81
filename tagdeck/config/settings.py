"""
Settings management for the tagdeck player.
Loads user preferences from a JSON file on top of built-in defaults.
"""

import copy
import json
import logging
import os
from pathlib import Path

from tagdeck.audio.audio_metadata import DEFAULT_READ_LIMIT


logger = logging.getLogger(__name__)


class SettingsManager:
    """Read-only view of player settings"""

    DEFAULT_SETTINGS = {
        'volume': 80,
        'shuffle_mode': False,
        'repeat_mode': 'off',
        'tag_read_limit': DEFAULT_READ_LIMIT,
        'seek_step': 5,
        'volume_step': 5,
        'equalizer': {'gain': 100, 'bass': 0, 'mid': 0, 'treble': 0},
    }

    def __init__(self, settings_file=None):
        """
        Initialize settings manager.

        Args:
            settings_file: Path to settings JSON file. Defaults to ~/.tagdeck.json
        """
        if settings_file is None:
            settings_file = os.path.join(Path.home(), '.tagdeck.json')

        self.settings_file = settings_file
        self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)
        self.load()

    def load(self):
        """Load settings from file"""
        try:
            if os.path.exists(self.settings_file):
                with open(self.settings_file, 'r') as f:
                    saved = json.load(f)
                if not isinstance(saved, dict):
                    raise TypeError(f"expected a JSON object, got {type(saved).__name__}")
                # Merge with defaults so missing keys keep their default
                self.settings.update(saved)
        except (OSError, json.JSONDecodeError, ValueError, TypeError) as exc:
            logger.warning("Failed to load settings from %s: %s", self.settings_file, exc)
            self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)

    def get(self, key, default=None):
        """
        Get setting value.

        Args:
            key: Setting key
            default: Value returned when the key is neither set nor defaulted

        Returns:
            Setting value or default
        """
        if key in self.settings:
            return self.settings[key]
        return self.DEFAULT_SETTINGS.get(key, default)

    def set(self, key, value):
        """Override a setting for this session"""
        self.settings[key] = value

    def get_volume(self):
        """Get volume level (0-100)"""
        return int(self.get('volume'))

    def get_shuffle_mode(self):
        return bool(self.get('shuffle_mode'))

    def get_repeat_mode(self):
        """Get repeat mode ("off", "one" or "all")"""
        return self.get('repeat_mode')

    def get_tag_read_limit(self):
        """Maximum number of bytes read from each file when parsing tags"""
        return int(self.get('tag_read_limit'))

    def get_seek_step(self):
        return self.get('seek_step')

    def get_volume_step(self):
        return int(self.get('volume_step'))

    def get_equalizer(self):
        """Equalizer values merged over the default gain/bass/mid/treble"""
        values = dict(self.DEFAULT_SETTINGS['equalizer'])
        saved = self.get('equalizer')
        if isinstance(saved, dict):
            values.update(saved)
        return values
