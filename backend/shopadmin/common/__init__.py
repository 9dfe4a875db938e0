"""
Common Utilities

Shared modules used across the API:
- exceptions.py - Custom exception classes
- logging_setup.py - Structured logging setup
"""

from .exceptions import (
    ShopAdminError,
    ConfigWriteError,
    RelayError,
    RelayNotConfiguredError,
    MissingClientIdError,
    MissingEventNameError,
    RelayTransportError,
    MailerError,
)
from .logging_setup import (
    JsonFormatter,
    ServiceLoggerAdapter,
    setup_logging,
    get_service_logger,
)

__all__ = [
    "ShopAdminError",
    "ConfigWriteError",
    "RelayError",
    "RelayNotConfiguredError",
    "MissingClientIdError",
    "MissingEventNameError",
    "RelayTransportError",
    "MailerError",
    "JsonFormatter",
    "ServiceLoggerAdapter",
    "setup_logging",
    "get_service_logger",
]
