"""Error handling framework for load balancer sync operations."""

from typing import Optional, Dict, Any, List
from enum import Enum
from dataclasses import dataclass
from google.api_core.exceptions import GoogleAPICallError, GoogleAPIError, RetryError
from google.auth.exceptions import DefaultCredentialsError, GoogleAuthError, RefreshError
from mci_lb.utils.logging import get_logger

logger = get_logger(__name__)


class ErrorCategory(Enum):
    """Categories of errors that can occur while syncing."""
    VALIDATION = "validation"
    PROVIDER = "provider"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    CREDENTIAL = "credential"
    PERMISSION = "permission"
    RESOURCE_LIMIT = "resource_limit"
    NETWORK = "network"
    CODEC = "codec"
    STATUS = "status"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    CRITICAL = "critical"  # Sync cannot continue
    ERROR = "error"  # Operation failed
    WARNING = "warning"  # Non-fatal issue
    INFO = "info"  # Informational message


@dataclass
class ErrorContext:
    """Context information for an error."""
    resource_name: Optional[str] = None
    resource_type: Optional[str] = None
    operation: Optional[str] = None
    provider_operation: Optional[str] = None
    status_code: Optional[int] = None
    additional_info: Optional[Dict[str, Any]] = None


class SyncError(Exception):
    """Base exception for load balancer sync errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        suggestions: Optional[List[str]] = None
    ):
        """Initialize sync error.

        Args:
            message: Human-readable error message
            category: Error category
            severity: Error severity
            context: Additional context about the error
            cause: Original exception that caused this error
            suggestions: List of suggested fixes
        """
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.cause = cause
        self.suggestions = suggestions or []

    def to_user_message(self) -> str:
        """Convert error to user-friendly message.

        Returns:
            Formatted error message for display to user
        """
        lines = []

        lines.append(f"❌ {self.severity.value.upper()}: {self.message}")

        if self.context.resource_name:
            lines.append(f"   Resource: {self.context.resource_name}")
        if self.context.operation:
            lines.append(f"   Operation: {self.context.operation}")

        if self.cause:
            lines.append(f"   Cause: {str(self.cause)}")

        if self.suggestions:
            lines.append("\n💡 Suggested fixes:")
            for i, suggestion in enumerate(self.suggestions, 1):
                lines.append(f"   {i}. {suggestion}")

        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            'message': self.message,
            'category': self.category.value,
            'severity': self.severity.value,
            'context': {
                'resource_name': self.context.resource_name,
                'resource_type': self.context.resource_type,
                'operation': self.context.operation,
                'provider_operation': self.context.provider_operation,
                'status_code': self.context.status_code,
                'additional_info': self.context.additional_info
            },
            'cause': str(self.cause) if self.cause else None,
            'suggestions': self.suggestions
        }


class ValidationError(SyncError):
    """Invalid arguments passed to a sync operation."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.ERROR,
            **kwargs
        )


class ProviderError(SyncError):
    """Error returned by the cloud provider, passed through unclassified."""

    def __init__(self, message: str, code: Optional[int] = None, **kwargs):
        kwargs.setdefault('category', ErrorCategory.PROVIDER)
        kwargs.setdefault('severity', ErrorSeverity.ERROR)
        super().__init__(message, **kwargs)
        self.code = code
        if code is not None and self.context.status_code is None:
            self.context.status_code = code


class ResourceNotFoundError(ProviderError):
    """The provider has no resource with the requested name."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('category', ErrorCategory.NOT_FOUND)
        super().__init__(message, code=404, **kwargs)


class RejectedWithoutForceError(SyncError):
    """A differing live resource exists and overwriting it was not requested."""

    def __init__(self, message: str, diff: Optional[Dict[str, Any]] = None, **kwargs):
        kwargs.setdefault('suggestions', [
            'Re-run with --force to overwrite the existing forwarding rule',
            'Inspect the differences first with: mci-lb plan',
        ])
        super().__init__(
            message,
            category=ErrorCategory.CONFLICT,
            severity=ErrorSeverity.ERROR,
            **kwargs
        )
        self.diff = diff or {}


class EncodingError(SyncError):
    """The status record could not be serialized."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.CODEC,
            severity=ErrorSeverity.CRITICAL,
            **kwargs
        )


class DecodingError(SyncError):
    """A description field could not be parsed into a status record."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.CODEC,
            severity=ErrorSeverity.ERROR,
            **kwargs
        )


class LoadBalancerNotFoundError(SyncError):
    """No load balancer by this name has been deployed."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('suggestions', [
            'Check the load balancer name',
            'Create the load balancer first with: mci-lb ensure',
        ])
        super().__init__(
            message,
            category=ErrorCategory.NOT_FOUND,
            severity=ErrorSeverity.ERROR,
            **kwargs
        )


class StatusUnavailableError(SyncError):
    """The load balancer exists but its status cannot be determined."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('suggestions', [
            'The forwarding rule description may have been edited outside this tool',
            'Re-run mci-lb ensure --force to rewrite the status',
        ])
        super().__init__(
            message,
            category=ErrorCategory.STATUS,
            severity=ErrorSeverity.ERROR,
            **kwargs
        )


class ErrorHandler:
    """Handles and categorizes errors from the Google API client stack."""

    # HTTP status codes returned by the Compute Engine API
    HTTP_ERROR_MAPPING = {
        400: {
            'category': ErrorCategory.VALIDATION,
            'message': 'Invalid parameter or resource definition',
            'suggestions': [
                'Review the error message for the rejected field',
                'Check that the target proxy link is a full resource URL',
            ]
        },
        401: {
            'category': ErrorCategory.CREDENTIAL,
            'message': 'Request is not authenticated',
            'suggestions': [
                'Refresh credentials with: gcloud auth application-default login',
            ]
        },
        403: {
            'category': ErrorCategory.PERMISSION,
            'message': 'Access denied - insufficient permissions',
            'suggestions': [
                'Grant compute.globalForwardingRules.* permissions to the caller',
                'Verify the configured project id',
            ]
        },
        409: {
            'category': ErrorCategory.CONFLICT,
            'message': 'Resource already exists or is being modified',
            'suggestions': [
                'Another controller may be syncing the same load balancer',
                'Wait for the pending operation to finish and retry',
            ]
        },
        429: {
            'category': ErrorCategory.RESOURCE_LIMIT,
            'message': 'API rate limit or quota exceeded',
            'suggestions': [
                'Reduce the frequency of sync calls',
                'Request a quota increase for the project',
            ]
        },
        503: {
            'category': ErrorCategory.NETWORK,
            'message': 'Compute Engine API temporarily unavailable',
            'suggestions': [
                'Wait a few moments and retry',
            ]
        },
    }

    def handle_exception(
        self,
        error: Exception,
        context: Optional[ErrorContext] = None
    ) -> SyncError:
        """Handle an exception and convert to SyncError.

        Args:
            error: The exception to handle
            context: Additional context about where the error occurred

        Returns:
            SyncError with categorization and suggestions
        """
        context = context or ErrorContext()

        if isinstance(error, SyncError):
            return error

        if isinstance(error, GoogleAPICallError):
            return self._handle_api_error(error, context)

        if isinstance(error, RetryError):
            return ProviderError(
                message=f'Compute API call did not succeed before its deadline: {error.message}',
                category=ErrorCategory.NETWORK,
                context=context,
                cause=error,
                suggestions=[
                    'Check the Compute Engine API status for the project',
                    'Retry the operation',
                ]
            )

        if isinstance(error, GoogleAPIError):
            return ProviderError(
                message=f'Compute API error: {str(error)}',
                context=context,
                cause=error,
                suggestions=['Check the Compute Engine documentation for this error']
            )

        if isinstance(error, DefaultCredentialsError):
            return ProviderError(
                message='No Google Cloud credentials found',
                category=ErrorCategory.CREDENTIAL,
                severity=ErrorSeverity.CRITICAL,
                context=context,
                cause=error,
                suggestions=[
                    'Run: gcloud auth application-default login',
                    'Set GOOGLE_APPLICATION_CREDENTIALS to a service account key file',
                ]
            )

        if isinstance(error, GoogleAuthError):
            message = 'Google Cloud credentials could not be refreshed' \
                if isinstance(error, RefreshError) else 'Google Cloud authentication failed'
            return ProviderError(
                message=f'{message}: {str(error)}',
                category=ErrorCategory.CREDENTIAL,
                severity=ErrorSeverity.CRITICAL,
                context=context,
                cause=error,
                suggestions=[
                    'Refresh credentials with: gcloud auth application-default login',
                    'Check that the service account key is valid and not revoked',
                ]
            )

        if isinstance(error, (ConnectionError, TimeoutError)):
            return ProviderError(
                message=f'Network error: {str(error)}',
                category=ErrorCategory.NETWORK,
                context=context,
                cause=error,
                suggestions=['Check your network connectivity']
            )

        logger.debug(f"Unclassified error {type(error).__name__}: {error}")
        return SyncError(
            message=str(error),
            category=ErrorCategory.UNKNOWN,
            severity=ErrorSeverity.ERROR,
            context=context,
            cause=error,
            suggestions=['Check logs for more details']
        )

    def _handle_api_error(
        self,
        error: GoogleAPICallError,
        context: ErrorContext
    ) -> ProviderError:
        code = error.code
        error_message = error.message or str(error)

        if code == 404:
            return ResourceNotFoundError(
                f"Resource not found: {error_message}",
                context=context,
                cause=error
            )

        error_info = self.HTTP_ERROR_MAPPING.get(code)
        if error_info:
            return ProviderError(
                message=f"{error_info['message']}: {error_message}",
                code=code,
                category=error_info['category'],
                context=context,
                cause=error,
                suggestions=error_info['suggestions']
            )

        return ProviderError(
            message=f"Compute API error ({code}): {error_message}",
            code=code,
            context=context,
            cause=error,
            suggestions=['Check the Compute Engine documentation for this error']
        )


# Global error handler instance
error_handler = ErrorHandler()
