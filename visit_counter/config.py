"""
Configuration management for the visit counter service.

Settings are resolved with the following priority:
1. JSON config file (highest priority)
2. Environment variables
3. Default values (lowest priority)

The config file is either passed explicitly or named by the
VISIT_COUNTER_CONFIG environment variable.
"""

import os
import json
import logging
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any, List
from pathlib import Path

from visit_counter.exceptions import ConfigError

logger = logging.getLogger(__name__)

repo_root = Path(__file__).resolve().parent.parent

_VALID_LOG_LEVELS = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}


@dataclass
class Settings:
    """Service configuration.

    Attributes:
        counters_path: Counters JSON file; badge metadata lives next to it
        api_key: Key required by privileged routes (None disables them)
        log_level: Logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR')
        cors_origins: Allowed CORS origins ('*' allows any)
        frontend_dir: Directory holding the built configuration UI
        host: Bind address for the development server
        port: Bind port for the development server
    """
    counters_path: str = str(repo_root / 'data' / 'counters.json')
    api_key: Optional[str] = None
    log_level: str = 'INFO'
    cors_origins: List[str] = field(default_factory=lambda: ['*'])
    frontend_dir: str = str(repo_root / 'frontend' / 'dist')
    host: str = '127.0.0.1'
    port: int = 8000

    def validate(self) -> List[str]:
        """Validate settings and return list of error messages (empty if valid)."""
        errors = []
        if not self.counters_path or not isinstance(self.counters_path, str):
            errors.append("counters_path must be a non-empty string")
        if self.api_key is not None and (not isinstance(self.api_key, str) or not self.api_key):
            errors.append("api_key must be a non-empty string or None")
        if not isinstance(self.log_level, str) or self.log_level.upper() not in _VALID_LOG_LEVELS:
            errors.append(f"Log level must be one of {sorted(_VALID_LOG_LEVELS)}")
        if not isinstance(self.cors_origins, list) or not all(isinstance(o, str) for o in self.cors_origins):
            errors.append("cors_origins must be a list of strings")
        if not isinstance(self.port, int) or not (0 < self.port < 65536):
            errors.append("port must be an integer between 1 and 65535")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if data.get('api_key'):
            data['api_key'] = '***'
        return data


def _split_origins(value: str) -> List[str]:
    return [o.strip() for o in value.split(',') if o.strip()]


def _apply_environment(settings: Settings, environ) -> None:
    counters_path = environ.get('COUNTERS_PATH')
    if counters_path:
        settings.counters_path = counters_path

    api_key = environ.get('API_KEY')
    if api_key:
        settings.api_key = api_key

    log_level = environ.get('LOG_LEVEL')
    if log_level:
        settings.log_level = log_level.upper()

    origins = environ.get('CORS_ORIGINS')
    if origins:
        settings.cors_origins = _split_origins(origins)

    frontend_dir = environ.get('FRONTEND_DIR')
    if frontend_dir:
        settings.frontend_dir = frontend_dir

    host = environ.get('HOST')
    if host:
        settings.host = host

    port = environ.get('PORT')
    if port:
        try:
            settings.port = int(port)
        except (ValueError, TypeError):
            logger.warning(f"Invalid PORT environment variable: {port}")


def _apply_file(settings: Settings, file_path: str) -> bool:
    """Overlay values from a JSON config file. Returns True if the file was applied."""
    if not os.path.exists(file_path):
        logger.debug(f"Config file not found: {file_path}")
        return False
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to load config file {file_path}: {e}")
        return False
    if not isinstance(data, dict):
        logger.warning(f"Config file {file_path} must contain a JSON object")
        return False

    if 'counters_path' in data:
        settings.counters_path = str(data['counters_path'])
    if 'api_key' in data:
        settings.api_key = data['api_key'] or None
    if 'log_level' in data:
        settings.log_level = str(data['log_level']).upper()
    if 'cors_origins' in data:
        origins = data['cors_origins']
        settings.cors_origins = _split_origins(origins) if isinstance(origins, str) else origins
    if 'frontend_dir' in data:
        settings.frontend_dir = str(data['frontend_dir'])
    if 'host' in data:
        settings.host = str(data['host'])
    if 'port' in data:
        try:
            settings.port = int(data['port'])
        except (ValueError, TypeError):
            logger.warning(f"Invalid port in config: {data['port']}")
    logger.info(f"Loaded configuration from {file_path}")
    return True


def load_settings(config_file: Optional[str] = None, environ=None) -> Settings:
    """Resolve settings from defaults, the environment and an optional JSON file.

    Invalid values are reported as warnings and replaced by their defaults so
    the service can still start.
    """
    environ = os.environ if environ is None else environ
    settings = Settings()
    _apply_environment(settings, environ)
    config_file = config_file or environ.get('VISIT_COUNTER_CONFIG')
    if config_file:
        _apply_file(settings, config_file)

    errors = settings.validate()
    if errors:
        logger.warning(f"Configuration validation errors: {errors}")
        settings = _reset_invalid(settings)
    return settings


def _reset_invalid(settings: Settings) -> Settings:
    defaults = Settings()
    for name in asdict(defaults):
        probe = Settings(**{name: getattr(settings, name)})
        if probe.validate():
            setattr(settings, name, getattr(defaults, name))
    return settings


def require_valid(settings: Settings) -> Settings:
    """Return ``settings`` or raise ConfigError if any value is invalid."""
    errors = settings.validate()
    if errors:
        raise ConfigError(f"Invalid settings: {errors}", errors=errors)
    return settings
