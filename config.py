"""
Configuration management for ClipTrail
"""
import json
import os
import sys
from pathlib import Path


DEFAULT_CONFIG_DIR = Path.home() / '.cliptrail'
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / 'config.json'


class Config:
    """Configuration manager for ClipTrail"""

    DEFAULT_CONFIG = {
        'history_path': str(DEFAULT_CONFIG_DIR / 'history'),
        'enable_history': True,
        'auto_cache': False,
        'follow_symlinks': False,
        'preview_width': 120,
        'preview_lines': 3,
        'list_count': 10,
        'encryption_enabled': False,
        'salt_path': None,
    }

    def __init__(self, config_path=DEFAULT_CONFIG_PATH):
        self.config_path = Path(config_path)
        self.config = self._load_config()

    def _load_config(self):
        """Load configuration from file or fall back to defaults"""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    loaded_config = json.load(f)
                if not isinstance(loaded_config, dict):
                    raise ValueError("top level must be an object")
                # Merge with defaults to ensure all keys exist
                config = self.DEFAULT_CONFIG.copy()
                config.update(loaded_config)
                return config
            except (OSError, ValueError) as e:
                print(f"Error loading config: {e}", file=sys.stderr)
        return self.DEFAULT_CONFIG.copy()

    def save_config(self):
        """Save current configuration to file"""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w') as f:
                json.dump(self.config, f, indent=4)
            return True
        except OSError as e:
            print(f"Error saving config: {e}", file=sys.stderr)
            return False

    def write_defaults(self):
        """Reset to the default values and write them out"""
        self.config = self.DEFAULT_CONFIG.copy()
        return self.save_config()

    def get(self, key, default=None):
        """Get configuration value"""
        return self.config.get(key, default)

    def get_path(self, key):
        """Get configuration value as an expanded path"""
        value = self.get(key)
        if value is None:
            return None
        return Path(os.path.expanduser(str(value)))

    def get_salt_path(self):
        """Get the key derivation salt location, beside the config file unless set"""
        if self.get('salt_path'):
            return self.get_path('salt_path')
        return self.config_path.parent / '.salt'

    def set(self, key, value):
        """Set configuration value"""
        self.config[key] = value
        self.save_config()
