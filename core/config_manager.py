"""
Configuration Management for the LTI filter engine
"""

import os
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from enum import Enum

import yaml
from pydantic import BaseModel, ValidationError, field_validator

logger = logging.getLogger('core.config_manager')

class Environment(Enum):
    """Supported deployment environments"""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"

class ConfigurationError(Exception):
    """Raised when configuration is invalid or missing"""
    pass

class EngineConfiguration(BaseModel):
    """Engine-wide configuration model with Pydantic validation"""

    # Logging Configuration
    log_level: str = "INFO"

    # Runtime (filtering) precision
    runtime_dtype: str = "float32"

    # Numerical tolerances
    normalization_tolerance: float = 1e-10
    root_pairing_tolerance: float = 1e-8

    # Analysis defaults
    default_fft_size: int = 512
    default_impulse_response_length: int = 512

    # Coefficient hot swap: raise on length mismatch instead of ignoring it
    strict_coefficient_swap: bool = True

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of {valid_levels}')
        return v.upper()

    @field_validator('runtime_dtype')
    @classmethod
    def validate_runtime_dtype(cls, v):
        if v not in ('float32', 'float64'):
            raise ValueError('runtime_dtype must be float32 or float64')
        return v

    @field_validator('normalization_tolerance', 'root_pairing_tolerance')
    @classmethod
    def validate_tolerance(cls, v):
        if not 0.0 < v < 1e-2:
            raise ValueError('tolerances must be positive and smaller than 1e-2')
        return v

    @field_validator('default_fft_size')
    @classmethod
    def validate_fft_size(cls, v):
        if v < 2 or v & (v - 1):
            raise ValueError('default_fft_size must be a power of two')
        return v

    @field_validator('default_impulse_response_length')
    @classmethod
    def validate_impulse_response_length(cls, v):
        if v <= 0:
            raise ValueError('default_impulse_response_length must be positive')
        return v

class ConfigurationManager:
    """
    Centralized configuration management.

    Loads configuration from YAML files with environment-specific
    overrides and environment variable overrides on top.
    """

    def __init__(self, base_path: Optional[Path] = None):
        self.base_path = base_path or Path.cwd()
        self.config_dir = self.base_path / "config"
        self.environment = self._detect_environment()
        self._configuration: Optional[EngineConfiguration] = None

        logger.debug(f"ConfigurationManager initialized for environment: {self.environment.value}")

    def load_configuration(self) -> EngineConfiguration:
        """
        Load and validate configuration from all sources.

        Returns:
            Validated configuration object

        Raises:
            ConfigurationError: If configuration is invalid
        """
        try:
            config_data = self._load_base_configuration()
            config_data = self._apply_environment_overrides(config_data)
            config_data = self._apply_environment_variables(config_data)

            self._configuration = EngineConfiguration(**config_data)

            logger.debug("Configuration loaded successfully")
            return self._configuration

        except (ValidationError, yaml.YAMLError, OSError) as e:
            logger.error(f"Failed to load configuration: {e}")
            raise ConfigurationError(f"Configuration loading failed: {e}") from e

    def get_configuration(self) -> EngineConfiguration:
        """Get current configuration, loading if necessary"""
        if self._configuration is None:
            return self.load_configuration()
        return self._configuration

    def set_configuration(self, configuration: EngineConfiguration) -> None:
        """Replace the active configuration (embedding applications, tests)"""
        self._configuration = configuration

    def reload_configuration(self) -> EngineConfiguration:
        """Reload configuration from sources"""
        self._configuration = None
        return self.load_configuration()

    def get_config_value(self, key: str, default: Any = None) -> Any:
        """
        Get a specific configuration value.

        Args:
            key: Configuration field name
            default: Default value if key not found

        Returns:
            Configuration value
        """
        return getattr(self.get_configuration(), key, default)

    def validate_configuration(self, config_data: Dict[str, Any]) -> bool:
        """
        Validate configuration data without loading.

        Args:
            config_data: Configuration dictionary to validate

        Returns:
            True if valid, False otherwise
        """
        try:
            EngineConfiguration(**config_data)
            return True
        except ValidationError:
            return False

    def _detect_environment(self) -> Environment:
        """Detect current environment from the LTI_ENVIRONMENT variable"""
        env_var = os.getenv('LTI_ENVIRONMENT', '').lower()
        if env_var:
            try:
                return Environment(env_var)
            except ValueError:
                logger.warning(f"Unknown environment '{env_var}', using development")

        return Environment.DEVELOPMENT

    def _load_base_configuration(self) -> Dict[str, Any]:
        """Load base configuration from config/default.yaml"""
        config_data = {}

        default_config_path = self.config_dir / "default.yaml"
        if default_config_path.exists():
            config_data.update(self._load_yaml_file(default_config_path))
            logger.debug(f"Loaded base configuration from {default_config_path}")

        return config_data

    def _apply_environment_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment-specific configuration overrides"""

        env_config_path = self.config_dir / f"{self.environment.value}.yaml"
        if env_config_path.exists():
            env_config = self._load_yaml_file(env_config_path)
            config_data = {**config_data, **env_config}
            logger.debug(f"Applied environment overrides from {env_config_path}")

        return config_data

    def _apply_environment_variables(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides"""

        env_mappings = {
            'LTI_LOG_LEVEL': 'log_level',
            'LTI_RUNTIME_DTYPE': 'runtime_dtype',
            'LTI_NORMALIZATION_TOLERANCE': 'normalization_tolerance',
            'LTI_ROOT_PAIRING_TOLERANCE': 'root_pairing_tolerance',
            'LTI_DEFAULT_FFT_SIZE': 'default_fft_size',
            'LTI_DEFAULT_IMPULSE_RESPONSE_LENGTH': 'default_impulse_response_length',
            'LTI_STRICT_COEFFICIENT_SWAP': 'strict_coefficient_swap',
        }

        for env_var, config_key in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value is None:
                continue

            if config_key == 'strict_coefficient_swap':
                config_data[config_key] = env_value.lower() in ('true', '1', 'yes', 'on')
            else:
                # pydantic coerces numeric strings
                config_data[config_key] = env_value

            logger.debug(f"Applied environment variable {env_var} -> {config_key}")

        return config_data

    def _load_yaml_file(self, path: Path) -> Dict[str, Any]:
        """Load configuration from YAML file"""
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} must contain a mapping")
        return data


# Global configuration manager instance
_global_config_manager: Optional[ConfigurationManager] = None

def get_config_manager() -> ConfigurationManager:
    """Get the global configuration manager instance"""
    global _global_config_manager
    if _global_config_manager is None:
        _global_config_manager = ConfigurationManager()
    return _global_config_manager

def get_config() -> EngineConfiguration:
    """Get the current engine configuration"""
    return get_config_manager().get_configuration()

def set_config(configuration: EngineConfiguration) -> None:
    """Install a configuration object on the global manager"""
    get_config_manager().set_configuration(configuration)

def reload_config() -> EngineConfiguration:
    """Reload the engine configuration from sources"""
    return get_config_manager().reload_configuration()

def reset_config_manager() -> None:
    """Drop the global configuration manager (next access rebuilds it)"""
    global _global_config_manager
    _global_config_manager = None

def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging the same way for every entry point.

    Args:
        level: Logging level name, defaults to the configured log_level

    The root level is applied even when handlers were already installed.
    """
    numeric_level = getattr(logging, (level or get_config().log_level).upper())
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    logging.getLogger().setLevel(numeric_level)
