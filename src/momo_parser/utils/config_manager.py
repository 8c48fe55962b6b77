"""Configuration management for the SMS parser."""

import json
import os
import re
import yaml
from typing import Dict, Any, Optional
import logging

from ..models.core import ParserConfig


logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages loading and validation of parser configuration"""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager

        Args:
            config_path: Path to configuration file. If None, searches for default locations.
        """
        self.config_path = config_path
        self._config_cache: Optional[ParserConfig] = None

    def load_config(self, force_reload: bool = False) -> ParserConfig:
        """Load parser configuration from file or return default

        Args:
            force_reload: Force reload from file even if cached

        Returns:
            ParserConfig instance with loaded or default configuration
        """
        if self._config_cache is not None and not force_reload:
            return self._config_cache

        config_data = self._load_config_file()

        defaults = ParserConfig()
        self._config_cache = ParserConfig(
            currency_codes=config_data.get('currency_codes'),
            brand_keywords=config_data.get('brand_keywords'),
            airtime_counterparty=config_data.get('airtime_counterparty', defaults.airtime_counterparty),
            detect_categories=config_data.get('detect_categories', defaults.detect_categories),
        )

        logger.info(f"Configuration loaded successfully from {self.config_path or 'defaults'}")
        return self._config_cache

    def _load_config_file(self) -> Dict[str, Any]:
        """Load configuration from file

        Returns:
            Dictionary with configuration data or empty dict if no file found
            or the file is invalid
        """
        config_file = self._find_config_file()

        if not config_file or not os.path.exists(config_file):
            logger.info("No configuration file found, using defaults")
            return {}

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                if config_file.endswith('.json'):
                    data = json.load(f)
                elif config_file.endswith(('.yml', '.yaml')):
                    data = yaml.safe_load(f)
                else:
                    logger.warning(f"Unsupported config file format: {config_file}")
                    return {}

            self._validate_config_data(data)
            logger.info(f"Configuration loaded from {config_file}")
            return data

        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning(f"Error reading configuration file {config_file}: {e}. Using defaults.")
            return {}

    def _find_config_file(self) -> Optional[str]:
        """Find configuration file in standard locations

        Returns:
            Path to configuration file or None if not found
        """
        if self.config_path:
            return self.config_path

        search_paths = [
            'momo_parser.json',
            'momo_parser.yml',
            'momo_parser.yaml',
            'config/momo_parser.json',
            'config/momo_parser.yml',
            'config/momo_parser.yaml',
            os.path.expanduser('~/.momo_parser/config.json'),
            os.path.expanduser('~/.momo_parser/config.yml'),
        ]

        for path in search_paths:
            if os.path.exists(path):
                return path

        return None

    def _validate_config_data(self, data: Dict[str, Any]) -> None:
        """Validate configuration data structure

        Args:
            data: Configuration data to validate

        Raises:
            ValueError: If configuration data is invalid
        """
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a dictionary")

        if 'currency_codes' in data:
            codes = data['currency_codes']
            if not isinstance(codes, list) or not codes:
                raise ValueError("currency_codes must be a non-empty list")
            for code in codes:
                if not isinstance(code, str) or not code.strip():
                    raise ValueError("All currency codes must be non-empty strings")

        if 'brand_keywords' in data:
            brands = data['brand_keywords']
            if not isinstance(brands, dict):
                raise ValueError("brand_keywords must be a dictionary")
            for label, pattern in brands.items():
                if not isinstance(pattern, str):
                    raise ValueError(f"Pattern for brand {label} must be a string")
                try:
                    re.compile(pattern)
                except re.error as e:
                    raise ValueError(f"Invalid pattern for brand {label}: {e}") from e

        if 'airtime_counterparty' in data:
            if not isinstance(data['airtime_counterparty'], str) or not data['airtime_counterparty'].strip():
                raise ValueError("airtime_counterparty must be a non-empty string")

        if 'detect_categories' in data and not isinstance(data['detect_categories'], bool):
            raise ValueError("detect_categories must be a boolean")

    def save_config_template(self, output_path: str) -> None:
        """Generate and save a configuration file template

        Args:
            output_path: Path where to save the template
        """
        defaults = ParserConfig()
        template = {
            "currency_codes": defaults.currency_codes,
            "brand_keywords": defaults.brand_keywords,
            "airtime_counterparty": defaults.airtime_counterparty,
            "detect_categories": defaults.detect_categories,
        }

        output_dir = os.path.dirname(output_path)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            if output_path.endswith(('.yml', '.yaml')):
                yaml.dump(template, f, default_flow_style=False, indent=2)
            else:
                json.dump(template, f, indent=2)

        logger.info(f"Configuration template saved to {output_path}")

    def update_config(self, updates: Dict[str, Any]) -> None:
        """Update configuration with new values

        Args:
            updates: Dictionary of configuration updates
        """
        if self._config_cache is None:
            self.load_config()

        for key, value in updates.items():
            if hasattr(self._config_cache, key):
                setattr(self._config_cache, key, value)
                logger.debug(f"Updated configuration: {key} = {value}")
            else:
                logger.warning(f"Unknown configuration key: {key}")

    def reset_config(self) -> None:
        """Reset configuration cache, forcing reload on next access"""
        self._config_cache = None
        logger.debug("Configuration cache reset")


def get_default_config_manager() -> ConfigManager:
    """Get a default configuration manager instance

    Returns:
        ConfigManager instance with default settings
    """
    return ConfigManager()
