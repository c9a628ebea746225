"""
Configuration management for pagecraft.

This module handles loading and accessing configuration values from config.yaml.
It provides a centralized way to manage store endpoints, section aliases and
activity log defaults without changing code.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional
import logging


class ConfigManager:
    """
    Manages configuration loading and access for pagecraft.
    """

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        try:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

            with open(self.config_path, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f) or {}

            logging.info(f"Configuration loaded from {self.config_path}")

        except (OSError, yaml.YAMLError) as e:
            logging.warning(f"Failed to load configuration: {e}")
            self._config = self._get_default_config()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values as fallback."""
        return {
            "store": {
                "api_base": "https://api.notion.com",
                "web_url": "https://www.notion.so",
                "api_version": "2025-09-03",
                "timeout": 30.0,
                "page_size": 100,
                "token_env": "NOTION_TOKEN"
            },
            "activity_log": {
                "section_name": "Activity Log",
                "timezone_label": "ET",
                "timezone": None
            },
            "callout": {
                "default_icon": "\U0001F4A1",
                "default_color": "gray"
            },
            "fuzzy": {
                "threshold": 0.5
            },
            "sections": {
                "to do": {
                    "aliases": ["todo", "to-do", "to do", "todos", "checklist", "tasks"],
                    "icon_url": "https://www.notion.so/icons/checkmark-square_blue.svg",
                    "color": "blue_background"
                },
                "activity log": {
                    "aliases": ["activity log", "activitylog", "activity-log", "log", "history", "updates"],
                    "icon_url": "https://www.notion.so/icons/timeline_gray.svg",
                    "color": "gray_background"
                }
            },
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "paths": {
                "log_file": "pagecraft.log"
            }
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration value (e.g., "store.web_url")
            default: Default value if key is not found

        Returns:
            The configuration value

        Examples:
            config.get("store.api_base")  # Returns "https://api.notion.com"
            config.get("activity_log.timezone_label")  # Returns "ET"
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get an entire configuration section.

        Args:
            section: Name of the configuration section

        Returns:
            Dictionary containing the section configuration
        """
        return self._config.get(section, {})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    # Convenience properties for commonly used values

    @property
    def api_base(self) -> str:
        """Get the store REST API base URL."""
        return self.get("store.api_base", "https://api.notion.com")

    @property
    def web_url(self) -> str:
        """Get the store web host used for deep links."""
        return self.get("store.web_url", "https://www.notion.so")

    @property
    def api_version(self) -> str:
        """Get the store API version header value."""
        return self.get("store.api_version", "2025-09-03")

    @property
    def store_timeout(self) -> float:
        """Get the store request timeout."""
        return self.get("store.timeout", 30.0)

    @property
    def page_size(self) -> int:
        """Get the page size used when listing block children."""
        return self.get("store.page_size", 100)

    @property
    def token_env(self) -> str:
        """Get the environment variable name holding the store token."""
        return self.get("store.token_env", "NOTION_TOKEN")

    @property
    def activity_log_section(self) -> str:
        return self.get("activity_log.section_name", "Activity Log")

    @property
    def timezone_label(self) -> str:
        return self.get("activity_log.timezone_label", "ET")

    @property
    def timezone_name(self) -> Optional[str]:
        return self.get("activity_log.timezone")

    @property
    def callout_icon(self) -> str:
        return self.get("callout.default_icon", "\U0001F4A1")

    @property
    def callout_color(self) -> str:
        return self.get("callout.default_color", "gray")

    @property
    def fuzzy_threshold(self) -> float:
        """Get the minimum similarity score for fuzzy substitution."""
        return self.get("fuzzy.threshold", 0.5)

    @property
    def section_definitions(self) -> Dict[str, Any]:
        """Get section alias definitions from configuration."""
        return self.get("sections", {})

    @property
    def log_filename(self) -> str:
        """Get log file name."""
        return self.get("paths.log_file", "pagecraft.log")


# Global configuration instance
config = ConfigManager()
