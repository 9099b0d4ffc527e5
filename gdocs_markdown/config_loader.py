"""Configuration loader with YAML support and environment variable substitution."""

import copy
import os
import re
from typing import Any, Dict
from urllib.parse import urlparse

import yaml

FETCH_MODES = ('api', 'json')

DEFAULT_CONFIG: Dict[str, Any] = {
    'google': {
        'base_url': 'https://docs.googleapis.com',
        'token_url': 'https://oauth2.googleapis.com/token',
        'client_id': '${GOOGLE_DOCS_CLIENT_ID}',
        'client_secret': '${GOOGLE_DOCS_CLIENT_SECRET}',
        'access_token': '${GOOGLE_DOCS_ACCESS}',
        'refresh_token': '${GOOGLE_DOCS_REFRESH}',
        'json_export_path': None,
    },
    'fetch': {
        'mode': 'api',
        'dry_run': False,
    },
    'export': {
        'output_directory': '.',
        'overwrite': True,
        'report_path': None,
    },
    'advanced': {
        'request_timeout': 30,
        'max_retries': 3,
        'retry_backoff_factor': 2.0,
    },
    'logging': {},
}


class ConfigLoader:
    """Handles loading and validation of configuration files."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')

    @classmethod
    def load(cls, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from YAML file with environment variable substitution.

        Values missing from the file fall back to the built-in defaults.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)

        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a dictionary")

        merged = _deep_merge(copy.deepcopy(DEFAULT_CONFIG), config_data)
        return cls._substitute_env_vars_recursive(merged)

    @classmethod
    def defaults(cls) -> Dict[str, Any]:
        """Built-in configuration with credentials taken from the environment."""
        return cls._substitute_env_vars_recursive(copy.deepcopy(DEFAULT_CONFIG))

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> None:
        """
        Validate configuration for required fields and correct values.

        Args:
            config: Configuration dictionary to validate

        Raises:
            ValueError: If validation fails
        """
        mode = get_nested(config, 'fetch.mode', 'api')
        if mode not in FETCH_MODES:
            raise ValueError(f"fetch.mode must be one of: {list(FETCH_MODES)}")

        if mode == 'api':
            cls._validate_required_field(config, 'google.base_url')
            cls._validate_url(get_nested(config, 'google.base_url'), 'google.base_url')

            if not has_value(config, 'google.access_token'):
                # Without an access token the refresh flow must be possible
                cls._validate_required_field(config, 'google.refresh_token')
                cls._validate_required_field(config, 'google.client_id')
                cls._validate_required_field(config, 'google.client_secret')

            if has_value(config, 'google.refresh_token'):
                cls._validate_required_field(config, 'google.token_url')
                cls._validate_url(get_nested(config, 'google.token_url'), 'google.token_url')

        elif mode == 'json':
            cls._validate_required_field(config, 'google.json_export_path')
            json_path = get_nested(config, 'google.json_export_path')
            if not os.path.isdir(json_path):
                raise ValueError(
                    f"google.json_export_path '{json_path}' is not a valid directory"
                )

        output_dir = get_nested(config, 'export.output_directory', '.')
        if output_dir and os.path.exists(output_dir) and not os.path.isdir(output_dir):
            raise ValueError(f"export.output_directory '{output_dir}' is not a directory")

        overwrite = get_nested(config, 'export.overwrite', True)
        if not isinstance(overwrite, bool):
            raise ValueError("export.overwrite must be a boolean")

        timeout = get_nested(config, 'advanced.request_timeout', 30)
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ValueError("advanced.request_timeout must be a positive number")

        max_retries = get_nested(config, 'advanced.max_retries', 3)
        if isinstance(max_retries, bool) or not isinstance(max_retries, int) or max_retries < 0:
            raise ValueError("advanced.max_retries must be a non-negative integer")

        backoff = get_nested(config, 'advanced.retry_backoff_factor', 2.0)
        if isinstance(backoff, bool) or not isinstance(backoff, (int, float)) or backoff < 0:
            raise ValueError("advanced.retry_backoff_factor must be a non-negative number")

    @classmethod
    def merge_with_args(cls, config: Dict[str, Any], args) -> Dict[str, Any]:
        """
        Merge configuration file with CLI arguments.
        CLI arguments take precedence over config file values.

        Args:
            config: Base configuration dictionary
            args: CLI arguments with attributes matching config keys

        Returns:
            Merged configuration dictionary
        """
        merged = copy.deepcopy(config)

        for section in ('google', 'fetch', 'export', 'logging'):
            if not isinstance(merged.get(section), dict):
                merged[section] = {}

        if getattr(args, 'mode', None):
            merged['fetch']['mode'] = args.mode

        if getattr(args, 'dry_run', None) is not None:
            merged['fetch']['dry_run'] = args.dry_run

        if getattr(args, 'json_dir', None):
            merged['google']['json_export_path'] = args.json_dir

        if getattr(args, 'output_dir', None):
            merged['export']['output_directory'] = args.output_dir

        if getattr(args, 'report', None):
            merged['export']['report_path'] = args.report

        if getattr(args, 'log_file', None):
            merged['logging']['file'] = args.log_file

        verbose = getattr(args, 'verbose', 0)
        if verbose:
            merged['logging']['level'] = 'DEBUG' if verbose >= 2 else 'INFO'

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

    @staticmethod
    def _validate_required_field(config: dict, field: str) -> None:
        """Validate that a required field exists and has a value."""
        value = get_nested(config, field)
        if value is None or value == '':
            raise ValueError(f"Missing required configuration: {field}")

        if isinstance(value, str) and '${' in value:
            match = ConfigLoader.ENV_VAR_PATTERN.search(value)
            var_name = match.group(1) if match else value
            raise ValueError(
                f"Configuration field '{field}' contains unsubstituted environment variable: {value}. "
                f"Please set the {var_name} environment variable or provide a value in config file."
            )

    @staticmethod
    def _validate_url(url: str, field_name: str) -> None:
        """Validate URL format."""
        parsed = urlparse(url)
        if not parsed.scheme or parsed.scheme not in ['http', 'https']:
            raise ValueError(f"{field_name} must use http or https scheme: {url}")
        if not parsed.netloc:
            raise ValueError(f"{field_name} missing hostname: {url}")


def get_nested(config: dict, path: str, default: Any = None) -> Any:
    """Safely retrieve nested configuration values using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "google.base_url")
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


def has_value(config: dict, path: str) -> bool:
    """True when the field is set and is not an unsubstituted placeholder."""
    value = get_nested(config, path)
    if value is None or value == '':
        return False
    return not (isinstance(value, str) and ConfigLoader.ENV_VAR_PATTERN.search(value))


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


__all__ = ['ConfigLoader', 'get_nested', 'has_value']
