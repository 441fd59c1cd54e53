"""
Tests for engine configuration loading and validation
"""

import logging

import pytest

from core import (
    ConfigurationManager, ConfigurationError, EngineConfiguration, Environment,
    get_config, set_config, setup_logging
)

ENV_VARS = [
    'LTI_ENVIRONMENT',
    'LTI_LOG_LEVEL',
    'LTI_RUNTIME_DTYPE',
    'LTI_NORMALIZATION_TOLERANCE',
    'LTI_ROOT_PAIRING_TOLERANCE',
    'LTI_DEFAULT_FFT_SIZE',
    'LTI_DEFAULT_IMPULSE_RESPONSE_LENGTH',
    'LTI_STRICT_COEFFICIENT_SWAP',
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def config_dir(tmp_path):
    path = tmp_path / "config"
    path.mkdir()
    return path


class TestEngineConfiguration:
    """Model defaults and field validation"""

    def test_defaults(self):
        config = EngineConfiguration()

        assert config.log_level == "INFO"
        assert config.runtime_dtype == "float32"
        assert config.normalization_tolerance == 1e-10
        assert config.default_fft_size == 512
        assert config.strict_coefficient_swap is True

    def test_log_level_is_upper_cased(self):
        assert EngineConfiguration(log_level="debug").log_level == "DEBUG"

    @pytest.mark.parametrize("field,value", [
        ("log_level", "VERBOSE"),
        ("runtime_dtype", "float16"),
        ("normalization_tolerance", 0.0),
        ("default_fft_size", 500),
        ("default_impulse_response_length", 0),
    ])
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValueError):
            EngineConfiguration(**{field: value})


class TestConfigurationManager:
    """Layered loading: YAML defaults, environment file, environment variables"""

    def test_without_files_uses_defaults(self, clean_env, tmp_path):
        manager = ConfigurationManager(tmp_path)

        assert manager.environment is Environment.DEVELOPMENT
        assert manager.get_configuration() == EngineConfiguration()

    def test_yaml_defaults(self, clean_env, tmp_path, config_dir):
        (config_dir / "default.yaml").write_text("runtime_dtype: float64\ndefault_fft_size: 1024\n")

        config = ConfigurationManager(tmp_path).load_configuration()

        assert config.runtime_dtype == "float64"
        assert config.default_fft_size == 1024

    def test_environment_file_overrides_defaults(self, clean_env, tmp_path, config_dir):
        (config_dir / "default.yaml").write_text("log_level: INFO\ndefault_fft_size: 1024\n")
        (config_dir / "testing.yaml").write_text("log_level: DEBUG\n")
        clean_env.setenv('LTI_ENVIRONMENT', 'testing')

        manager = ConfigurationManager(tmp_path)
        config = manager.load_configuration()

        assert manager.environment is Environment.TESTING
        assert config.log_level == "DEBUG"
        assert config.default_fft_size == 1024

    def test_unknown_environment_falls_back_to_development(self, clean_env, tmp_path):
        clean_env.setenv('LTI_ENVIRONMENT', 'staging')

        assert ConfigurationManager(tmp_path).environment is Environment.DEVELOPMENT

    def test_environment_variables_override_files(self, clean_env, tmp_path, config_dir):
        (config_dir / "default.yaml").write_text("strict_coefficient_swap: true\n")
        clean_env.setenv('LTI_STRICT_COEFFICIENT_SWAP', 'false')
        clean_env.setenv('LTI_DEFAULT_FFT_SIZE', '2048')

        config = ConfigurationManager(tmp_path).load_configuration()

        assert config.strict_coefficient_swap is False
        assert config.default_fft_size == 2048

    def test_invalid_environment_variable(self, clean_env, tmp_path):
        clean_env.setenv('LTI_RUNTIME_DTYPE', 'int8')

        with pytest.raises(ConfigurationError):
            ConfigurationManager(tmp_path).load_configuration()

    def test_malformed_yaml(self, clean_env, tmp_path, config_dir):
        (config_dir / "default.yaml").write_text("runtime_dtype: [float32\n")

        with pytest.raises(ConfigurationError):
            ConfigurationManager(tmp_path).load_configuration()

    def test_non_mapping_yaml(self, clean_env, tmp_path, config_dir):
        (config_dir / "default.yaml").write_text("- float32\n- float64\n")

        with pytest.raises(ConfigurationError):
            ConfigurationManager(tmp_path).load_configuration()

    def test_reload_picks_up_changes(self, clean_env, tmp_path, config_dir):
        config_file = config_dir / "default.yaml"
        config_file.write_text("default_fft_size: 256\n")
        manager = ConfigurationManager(tmp_path)
        assert manager.get_configuration().default_fft_size == 256

        config_file.write_text("default_fft_size: 128\n")

        assert manager.get_configuration().default_fft_size == 256
        assert manager.reload_configuration().default_fft_size == 128

    def test_get_config_value(self, clean_env, tmp_path):
        manager = ConfigurationManager(tmp_path)

        assert manager.get_config_value('root_pairing_tolerance') == 1e-8
        assert manager.get_config_value('missing', 'fallback') == 'fallback'

    def test_validate_configuration(self, clean_env, tmp_path):
        manager = ConfigurationManager(tmp_path)

        assert manager.validate_configuration({'default_fft_size': 256})
        assert not manager.validate_configuration({'default_fft_size': 300})


class TestGlobalConfiguration:
    """Module-level accessors"""

    def test_set_config(self):
        set_config(EngineConfiguration(runtime_dtype="float64"))

        assert get_config().runtime_dtype == "float64"


@pytest.fixture
def root_logger():
    logger = logging.getLogger()
    level = logger.level
    yield logger
    logger.setLevel(level)


class TestLoggingSetup:
    """Root logger bootstrap"""

    def test_explicit_level(self, root_logger):
        setup_logging("debug")

        assert root_logger.level == logging.DEBUG

    def test_level_from_configuration(self, root_logger):
        set_config(EngineConfiguration(log_level="warning"))

        setup_logging()

        assert root_logger.level == logging.WARNING
