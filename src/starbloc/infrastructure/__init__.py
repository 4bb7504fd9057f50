"""
Infrastructure - configuration and logging setup.
"""

from .configuration import (
    ApplicationConfig, Environment, LoggingConfig, ProcessorConfig, WebConfig,
    setup_logging,
)

__all__ = [
    "ApplicationConfig", "Environment", "LoggingConfig",
    "ProcessorConfig", "WebConfig", "setup_logging",
]
