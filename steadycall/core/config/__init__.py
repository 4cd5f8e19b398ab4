"""Configuration management module."""

from steadycall.core.config.settings import (
    ConfigManager,
    GateSettings,
    LoggingSettings,
    RetrySettings,
    SteadyCallConfig,
    apply_logging_settings,
    get_default_config,
    load_config_from_env,
)

__all__ = [
    "ConfigManager",
    "SteadyCallConfig",
    "RetrySettings",
    "GateSettings",
    "LoggingSettings",
    "apply_logging_settings",
    "get_default_config",
    "load_config_from_env",
]
