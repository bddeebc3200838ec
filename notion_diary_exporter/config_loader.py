"""Configuration loader with YAML support and environment variable substitution."""

import copy
import os
import re
from typing import Any, Dict
from urllib.parse import urlparse

import yaml

from .models import ConfigurationError


class ConfigLoader:
    """Handles loading and validation of configuration files."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')

    DEFAULT_CONFIG: Dict[str, Any] = {
        'notion': {
            'token': '${NOTION_TOKEN}',
            'database_id': '${NOTION_DATABASE_ID}',
            'api_version': '2022-06-28',
            'base_url': 'https://api.notion.com/v1'
        },
        'export': {
            'output_directory': './diary',
            'combined_filename': '_all.md',
            'combined_title': '3行日記（全件まとめ）',
            'title_property': 'タイトル',
            'date_property': '日付',
            'only_matching': True,
            'filter_substring': '3行日記',
            'fallback_properties': ['本文', '内容', 'テキスト', 'Body', 'Content'],
            'show_progress': True
        },
        'advanced': {
            'request_timeout': 30,
            'max_retries': 3,
            'retry_backoff_factor': 2.0,
            'rate_limit': 0.0,
            'page_size': 100
        },
        'logging': {
            'level': None,
            'file': None
        }
    }

    @classmethod
    def default_config(cls) -> Dict[str, Any]:
        """
        Built-in configuration reading credentials from NOTION_TOKEN and
        NOTION_DATABASE_ID, with environment variables already substituted.
        """
        return cls._substitute_env_vars_recursive(copy.deepcopy(cls.DEFAULT_CONFIG))

    @classmethod
    def load(cls, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from YAML file with environment variable substitution.

        Values missing from the file are taken from the built-in defaults.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
            ConfigurationError: If the file does not contain a mapping
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ConfigurationError("Configuration file must contain a dictionary")

        merged = _deep_merge(copy.deepcopy(cls.DEFAULT_CONFIG), config_data)
        return cls._substitute_env_vars_recursive(merged)

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> None:
        """
        Validate configuration for required fields and correct values.

        Args:
            config: Configuration dictionary to validate

        Raises:
            ConfigurationError: If validation fails
        """
        for section in ('notion', 'export', 'advanced', 'logging'):
            if section in config and not isinstance(config[section], dict):
                raise ConfigurationError(f"Configuration section '{section}' must be a mapping")

        cls._validate_required_field(config, 'notion.token')
        cls._validate_required_field(config, 'notion.database_id')
        cls._validate_required_field(config, 'export.output_directory')
        cls._validate_required_field(config, 'export.title_property')
        cls._validate_required_field(config, 'export.date_property')
        cls._validate_required_field(config, 'export.combined_filename')

        base_url = get_nested(config, 'notion.base_url')
        if base_url:
            cls._validate_url(base_url, 'notion.base_url')

        only_matching = get_nested(config, 'export.only_matching', True)
        if not isinstance(only_matching, bool):
            raise ConfigurationError("export.only_matching must be a boolean")
        if only_matching:
            cls._validate_required_field(config, 'export.filter_substring')

        fallback_properties = get_nested(config, 'export.fallback_properties', [])
        if not isinstance(fallback_properties, list) or \
                not all(isinstance(name, str) for name in fallback_properties):
            raise ConfigurationError("export.fallback_properties must be a list of property names")

        output_dir = get_nested(config, 'export.output_directory')
        if os.path.exists(output_dir) and not os.path.isdir(output_dir):
            raise ConfigurationError(f"export.output_directory '{output_dir}' is not a directory")

        timeout = get_nested(config, 'advanced.request_timeout', 30)
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigurationError("advanced.request_timeout must be a positive number")

        max_retries = get_nested(config, 'advanced.max_retries', 3)
        if isinstance(max_retries, bool) or not isinstance(max_retries, int) or max_retries < 0:
            raise ConfigurationError("advanced.max_retries must be a non-negative integer")

        rate_limit = get_nested(config, 'advanced.rate_limit', 0.0)
        if isinstance(rate_limit, bool) or not isinstance(rate_limit, (int, float)) or rate_limit < 0:
            raise ConfigurationError("advanced.rate_limit must be a non-negative number")

        page_size = get_nested(config, 'advanced.page_size', 100)
        if isinstance(page_size, bool) or not isinstance(page_size, int) or not 1 <= page_size <= 100:
            raise ConfigurationError("advanced.page_size must be an integer between 1 and 100")

    @classmethod
    def merge_with_args(cls, config: Dict[str, Any], args) -> Dict[str, Any]:
        """
        Merge configuration with CLI arguments.
        CLI arguments take precedence over config file values.

        Args:
            config: Base configuration dictionary
            args: CLI arguments with attributes matching config keys

        Returns:
            Merged configuration dictionary
        """
        merged = copy.deepcopy(config)

        for section in ('notion', 'export', 'logging'):
            if not isinstance(merged.get(section), dict):
                merged[section] = {}

        if getattr(args, 'output_dir', None):
            merged['export']['output_directory'] = args.output_dir

        if getattr(args, 'title_property', None):
            merged['export']['title_property'] = args.title_property

        if getattr(args, 'date_property', None):
            merged['export']['date_property'] = args.date_property

        if getattr(args, 'filter', None):
            merged['export']['only_matching'] = True
            merged['export']['filter_substring'] = args.filter

        if getattr(args, 'all', False):
            merged['export']['only_matching'] = False

        if getattr(args, 'log_file', None):
            merged['logging']['file'] = args.log_file

        return merged

    @classmethod
    def _substitute_env_vars_recursive(cls, data: Any) -> Any:
        """Recursively substitute environment variables in data structure."""
        if isinstance(data, dict):
            return {key: cls._substitute_env_vars_recursive(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [cls._substitute_env_vars_recursive(item) for item in data]
        elif isinstance(data, str):
            return cls._substitute_env_vars(data)
        else:
            return data

    @classmethod
    def _substitute_env_vars(cls, value: str) -> str:
        """Substitute environment variables in a string value."""
        def replace_match(match):
            env_value = os.getenv(match.group(1))
            return env_value if env_value is not None else match.group(0)

        return cls.ENV_VAR_PATTERN.sub(replace_match, value)

    @classmethod
    def _validate_required_field(cls, config: dict, field: str) -> None:
        """Validate that a required field exists and has a value."""
        value = get_nested(config, field)
        if value is None or value == '':
            raise ConfigurationError(f"Missing required configuration: {field}")

        # Check for unsubstituted environment variables
        if isinstance(value, str) and '${' in value:
            match = cls.ENV_VAR_PATTERN.search(value)
            var_name = match.group(1) if match else value
            raise ConfigurationError(
                f"Configuration field '{field}' contains unsubstituted environment variable: {value}. "
                f"Please set the {var_name} environment variable or provide a value in config file."
            )

    @staticmethod
    def _validate_url(url: str, field_name: str) -> None:
        """Validate URL format."""
        parsed = urlparse(url)
        if parsed.scheme not in ('http', 'https'):
            raise ConfigurationError(f"{field_name} must use http or https scheme: {url}")
        if not parsed.netloc:
            raise ConfigurationError(f"{field_name} missing hostname: {url}")


def get_nested(config: dict, path: str, default: Any = None) -> Any:
    """Safely retrieve nested configuration values using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "notion.database_id")
        default: Default value if path doesn't exist

    Returns:
        Value at the nested path or default
    """
    value = config

    for key in path.split('.'):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        # A section left empty in YAML (all keys commented out) loads as None
        if value is None and isinstance(base.get(key), dict):
            continue
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


__all__ = ['ConfigLoader', 'ConfigurationError', 'get_nested']
