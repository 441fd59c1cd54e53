"""
Core Infrastructure for the LTI filter engine

Provides engine-wide configuration (YAML files + environment variables,
validated with Pydantic) and the logging bootstrap shared by every entry point.
"""

from .config_manager import (
    ConfigurationManager, ConfigurationError, EngineConfiguration, Environment,
    get_config_manager, get_config, set_config, reload_config,
    reset_config_manager, setup_logging
)

__all__ = [
    'ConfigurationManager',
    'ConfigurationError',
    'EngineConfiguration',
    'Environment',
    'get_config_manager',
    'get_config',
    'set_config',
    'reload_config',
    'reset_config_manager',
    'setup_logging'
]
