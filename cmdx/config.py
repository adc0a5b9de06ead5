"""
Configuration management for cmdx.
Handles user defaults (source/target OS, output style) and persistent settings.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import find_dotenv, load_dotenv

from cmdx.platforms import Os, PackageManager, current_os

logger = logging.getLogger(__name__)

# Load .env file if it exists, searching upward from the working directory
_dotenv_path = find_dotenv(usecwd=True)
if _dotenv_path:
    load_dotenv(_dotenv_path)


_TRUTHY = ("1", "true", "yes", "on")


class Config:
    """Manages cmdx configuration and settings."""

    DEFAULT_CONFIG = {
        "default_from": None,  # Auto-detected
        "default_to": None,  # Linux
        "default_package_manager": None,  # Inferred from the command
        "json_output": False,
        "highlight": True,
        "show_warnings": True,
    }

    # Environment variable -> setting
    ENV_OVERRIDES = {
        "CMDX_FROM": "default_from",
        "CMDX_TO": "default_to",
        "CMDX_PACKAGE_MANAGER": "default_package_manager",
        "CMDX_JSON": "json_output",
    }

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize config system.

        Args:
            config_dir: Override default config directory
        """
        if config_dir:
            self.config_dir = Path(config_dir).expanduser()
        else:
            self.config_dir = Path.home() / ".cmdx"

        self.config_file = self.config_dir / "config.json"
        self.settings = self._load_config()
        self._load_env_vars()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file or fall back to defaults."""
        config = self.DEFAULT_CONFIG.copy()
        if not self.config_file.exists():
            return config
        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Config file %s is corrupted, using defaults", self.config_file)
            return config
        if isinstance(loaded, dict):
            config.update(loaded)
        return config

    def _load_env_vars(self):
        """Apply environment overrides on top of the file settings."""
        for var, key in self.ENV_OVERRIDES.items():
            value = os.getenv(var)
            if not value:
                continue
            if key == "json_output":
                self.settings[key] = value.strip().lower() in _TRUTHY
            else:
                self.settings[key] = value
        if os.getenv("NO_COLOR") or os.getenv("CMDX_NO_COLOR"):
            self.settings["highlight"] = False

    def save(self):
        """Save current configuration to file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(self.settings, f, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        return self.settings.get(key, default)

    def set(self, key: str, value: Any):
        """Set a configuration value and save."""
        self.settings[key] = value
        self.save()

    def source_os(self) -> Os:
        """OS commands are assumed to come from (defaults to this machine)."""
        value = self.settings.get("default_from")
        return Os.parse(value) if value else current_os()

    def target_os(self) -> Os:
        """OS commands are translated to by default."""
        value = self.settings.get("default_to")
        return Os.parse(value) if value else Os.LINUX

    def package_manager(self) -> Optional[PackageManager]:
        """Default target package manager, if one is configured."""
        value = self.settings.get("default_package_manager")
        return PackageManager.parse(value) if value else None
