"""
Application configuration and logging setup.
"""

import json
import logging
import logging.handlers

import pytest

from starbloc import ApplicationConfig, Environment, LoggingConfig, setup_logging


class TestEnvironmentDefaults:
    def test_development(self):
        config = ApplicationConfig.for_environment(Environment.DEVELOPMENT)
        assert config.debug is True
        assert config.web.debug is True
        assert config.logging.level == "DEBUG"

    def test_testing(self):
        config = ApplicationConfig.for_environment(Environment.TESTING)
        assert config.logging.level == "WARNING"
        assert config.processor.max_pending_events == 0

    def test_production(self):
        config = ApplicationConfig.for_environment(Environment.PRODUCTION)
        assert config.debug is False
        assert config.web.host == "0.0.0.0"
        assert config.processor.max_pending_events == 1000

    def test_plain_defaults(self):
        config = ApplicationConfig()
        assert config.web.prefix == "/counter"
        assert config.web.port == 8000
        assert config.processor.replay_latest is False
        assert config.processor.enable_metrics is True


class TestLoading:
    def test_dict_round_trip(self):
        config = ApplicationConfig.for_environment(Environment.PRODUCTION)
        config.web.secret_key = "s3cret"
        restored = ApplicationConfig.from_dict(config.to_dict())
        assert restored == config

    def test_from_dict_ignores_unknown_keys(self):
        config = ApplicationConfig.from_dict({
            "environment": "testing",
            "web": {"port": 9001, "colour": "blue"},
            "processor": {"replay_latest": True},
        })
        assert config.environment is Environment.TESTING
        assert config.web.port == 9001
        assert not hasattr(config.web, "colour")
        assert config.processor.replay_latest is True

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("STARBLOC_ENV", "production")
        monkeypatch.setenv("STARBLOC_PORT", "8123")
        monkeypatch.setenv("STARBLOC_HOST", "127.0.0.1")
        monkeypatch.setenv("STARBLOC_LOG_LEVEL", "debug")
        monkeypatch.setenv("STARBLOC_DEBUG", "true")
        monkeypatch.setenv("STARBLOC_SECRET_KEY", "abc")

        config = ApplicationConfig.from_environment()
        assert config.environment is Environment.PRODUCTION
        assert config.web.port == 8123
        assert config.web.host == "127.0.0.1"
        assert config.logging.level == "DEBUG"
        assert config.debug is True
        assert config.web.debug is True
        assert config.web.secret_key == "abc"

    def test_from_environment_defaults_to_development(self, monkeypatch):
        for name in ("STARBLOC_ENV", "STARBLOC_DEBUG", "STARBLOC_HOST", "STARBLOC_PORT",
                     "STARBLOC_SECRET_KEY", "STARBLOC_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        config = ApplicationConfig.from_environment()
        assert config.environment is Environment.DEVELOPMENT

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "starbloc.json"
        path.write_text(json.dumps({"environment": "staging", "web": {"prefix": "/clicks"}}))

        config = ApplicationConfig.from_file(path)
        assert config.environment is Environment.STAGING
        assert config.web.prefix == "/clicks"

    def test_from_yaml_file(self, tmp_path):
        path = tmp_path / "starbloc.yaml"
        path.write_text("environment: testing\nprocessor:\n  max_pending_events: 5\n")

        config = ApplicationConfig.from_file(str(path))
        assert config.environment is Environment.TESTING
        assert config.processor.max_pending_events == 5

    def test_empty_yaml_file(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert ApplicationConfig.from_file(path).environment is Environment.DEVELOPMENT

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ApplicationConfig.from_file(tmp_path / "nope.json")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "starbloc.toml"
        path.write_text("")
        with pytest.raises(ValueError, match=".toml"):
            ApplicationConfig.from_file(path)


class TestSetupLogging:
    @pytest.fixture
    def logger_name(self):
        name = "starbloc_test_logging"
        yield name
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    def test_stream_handler_by_default(self, logger_name):
        logger = setup_logging(LoggingConfig(level="warning"), logger_name=logger_name)
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_rotating_file_handler(self, tmp_path, logger_name):
        log_file = tmp_path / "logs" / "starbloc.log"
        config = LoggingConfig(level="INFO", file_path=str(log_file), backup_count=2)

        logger = setup_logging(config, logger_name=logger_name)
        logger.info("processor started")
        for handler in logger.handlers:
            handler.flush()

        assert isinstance(logger.handlers[0], logging.handlers.RotatingFileHandler)
        assert logger.handlers[0].backupCount == 2
        assert "processor started" in log_file.read_text()

    def test_repeated_setup_replaces_handlers(self, logger_name):
        setup_logging(LoggingConfig(), logger_name=logger_name)
        logger = setup_logging(LoggingConfig(level="DEBUG"), logger_name=logger_name)
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
