"""Utility modules for logging and error handling."""

from mci_lb.utils.errors import (
    ErrorCategory,
    ErrorSeverity,
    ErrorContext,
    SyncError,
    ValidationError,
    ProviderError,
    ResourceNotFoundError,
    RejectedWithoutForceError,
    EncodingError,
    DecodingError,
    LoadBalancerNotFoundError,
    StatusUnavailableError,
    ErrorHandler,
    error_handler
)
from mci_lb.utils.logging import get_logger, setup_logging, LogContext

__all__ = [
    # Errors
    'ErrorCategory',
    'ErrorSeverity',
    'ErrorContext',
    'SyncError',
    'ValidationError',
    'ProviderError',
    'ResourceNotFoundError',
    'RejectedWithoutForceError',
    'EncodingError',
    'DecodingError',
    'LoadBalancerNotFoundError',
    'StatusUnavailableError',
    'ErrorHandler',
    'error_handler',

    # Logging
    'get_logger',
    'setup_logging',
    'LogContext',
]
