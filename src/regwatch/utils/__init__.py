"""Utility functions for regwatch."""

from regwatch.utils.logging import configure_logging, get_check_logger, get_logger
from regwatch.utils.errors import (
    RegwatchError,
    NotFoundError,
    UnauthorizedError,
    RegistryUnavailableError,
    RequestFailedError,
    TransportError,
    UnsupportedAuthSchemeError,
    MissingRealmError,
    TokenExchangeFailedError,
    NoNewerTagError,
    InvalidTagError,
    InvalidResponseError,
    MissingDigestError,
    ConfigurationError,
)
from regwatch.utils.config import (
    RegwatchConfig,
    RegistryConfig,
    HttpConfig,
    CheckConfig,
    load_config,
    save_config,
)
from regwatch.utils.version import is_valid, parse_version

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "get_check_logger",
    # Errors
    "RegwatchError",
    "NotFoundError",
    "UnauthorizedError",
    "RegistryUnavailableError",
    "RequestFailedError",
    "TransportError",
    "UnsupportedAuthSchemeError",
    "MissingRealmError",
    "TokenExchangeFailedError",
    "NoNewerTagError",
    "InvalidTagError",
    "InvalidResponseError",
    "MissingDigestError",
    "ConfigurationError",
    # Config
    "RegwatchConfig",
    "RegistryConfig",
    "HttpConfig",
    "CheckConfig",
    "load_config",
    "save_config",
    # Version
    "is_valid",
    "parse_version",
]
