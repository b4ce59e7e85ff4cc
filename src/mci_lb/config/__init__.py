"""Configuration loading and validation."""

from .models import (
    HTTP_DEFAULT_PORT_RANGE,
    HTTPS_DEFAULT_PORT_RANGE,
    ForwardingRulePolicy,
    LoadBalancerConfig,
    MCIConfig,
    ProjectConfig,
    SyncSettings,
)
from .parser import DEFAULT_CONFIG_PATH, ConfigValidationError, load_config, parse_config

__all__ = [
    "HTTP_DEFAULT_PORT_RANGE",
    "HTTPS_DEFAULT_PORT_RANGE",
    "ForwardingRulePolicy",
    "LoadBalancerConfig",
    "MCIConfig",
    "ProjectConfig",
    "SyncSettings",
    "DEFAULT_CONFIG_PATH",
    "ConfigValidationError",
    "load_config",
    "parse_config",
]
