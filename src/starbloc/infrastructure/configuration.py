"""
Configuration Management for starbloc Applications

🔧 Unified Configuration System:
Dataclass-based settings for the event processor, the web connector and
logging, with per-environment defaults and environment-variable overrides.
"""

import json
import logging
import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional, Union

class Environment(Enum):
    """Application environments"""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"

@dataclass
class ProcessorConfig:
    """Event processor configuration"""
    max_pending_events: int = 0  # 0 = unbounded
    replay_latest: bool = False  # new subscribers get the current snapshot first
    enable_metrics: bool = True

@dataclass
class WebConfig:
    """Web connector configuration"""
    host: str = "localhost"
    port: int = 8000
    prefix: str = "/counter"
    debug: bool = False
    secret_key: Optional[str] = None
    live_heartbeat_seconds: float = 15.0

@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5

@dataclass
class ApplicationConfig:
    """Complete application configuration"""
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    processor: ProcessorConfig = field(default_factory=ProcessorConfig)
    web: WebConfig = field(default_factory=WebConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def for_environment(cls, environment: Environment) -> 'ApplicationConfig':
        """Create configuration for specific environment"""
        config = cls(environment=environment)

        if environment == Environment.DEVELOPMENT:
            config.debug = True
            config.web.debug = True
            config.logging.level = "DEBUG"

        elif environment == Environment.TESTING:
            config.logging.level = "WARNING"

        elif environment == Environment.PRODUCTION:
            config.debug = False
            config.web.debug = False
            config.web.host = "0.0.0.0"
            config.logging.level = "INFO"
            config.processor.max_pending_events = 1000

        return config

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'ApplicationConfig':
        """Create configuration from dictionary"""
        environment = Environment(config_dict.get("environment", Environment.DEVELOPMENT.value))
        config = cls(environment=environment)

        if "debug" in config_dict:
            config.debug = bool(config_dict["debug"])

        # Unknown keys in nested sections are ignored
        for section in ("processor", "web", "logging"):
            target = getattr(config, section)
            for key, value in config_dict.get(section, {}).items():
                if hasattr(target, key):
                    setattr(target, key, value)

        return config

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> 'ApplicationConfig':
        """Load configuration from a JSON or YAML file"""
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if config_path.suffix == '.json':
            with open(config_path) as f:
                config_dict = json.load(f)
        elif config_path.suffix in ('.yml', '.yaml'):
            import yaml
            with open(config_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            raise ValueError(f"Unsupported configuration file format: {config_path.suffix}")

        return cls.from_dict(config_dict)

    @classmethod
    def from_environment(cls) -> 'ApplicationConfig':
        """Create configuration from environment variables"""
        env_name = os.getenv('STARBLOC_ENV', 'development')
        config = cls.for_environment(Environment(env_name))

        if os.getenv('STARBLOC_DEBUG'):
            config.debug = os.getenv('STARBLOC_DEBUG').lower() == 'true'
            config.web.debug = config.debug

        if os.getenv('STARBLOC_HOST'):
            config.web.host = os.getenv('STARBLOC_HOST')

        if os.getenv('STARBLOC_PORT'):
            config.web.port = int(os.getenv('STARBLOC_PORT'))

        if os.getenv('STARBLOC_SECRET_KEY'):
            config.web.secret_key = os.getenv('STARBLOC_SECRET_KEY')

        if os.getenv('STARBLOC_LOG_LEVEL'):
            config.logging.level = os.getenv('STARBLOC_LOG_LEVEL').upper()

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            "environment": self.environment.value,
            "debug": self.debug,
            "processor": {
                "max_pending_events": self.processor.max_pending_events,
                "replay_latest": self.processor.replay_latest,
                "enable_metrics": self.processor.enable_metrics,
            },
            "web": {
                "host": self.web.host,
                "port": self.web.port,
                "prefix": self.web.prefix,
                "debug": self.web.debug,
                "secret_key": self.web.secret_key,
                "live_heartbeat_seconds": self.web.live_heartbeat_seconds,
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
                "file_path": self.logging.file_path,
                "max_file_size": self.logging.max_file_size,
                "backup_count": self.logging.backup_count,
            },
        }

def setup_logging(config: LoggingConfig, logger_name: str = "starbloc") -> logging.Logger:
    """
    Configure the package logger from a LoggingConfig.

    Writes to stderr, or to a rotating file when ``file_path`` is set.
    Calling it again replaces the handlers installed by the previous call.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(config.level.upper())

    for handler in list(logger.handlers):
        if getattr(handler, "_starbloc_handler", False):
            logger.removeHandler(handler)
            handler.close()

    if config.file_path:
        Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
        )
    else:
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(logging.Formatter(config.format))
    handler._starbloc_handler = True
    logger.addHandler(handler)
    return logger

# Export main components
__all__ = [
    "ApplicationConfig", "Environment", "ProcessorConfig",
    "WebConfig", "LoggingConfig", "setup_logging",
]
