"""
Standardized exception hierarchy for hara
Provides rich context, consistent logging, and user-friendly error messages

The gamification engine itself never raises these for normal inputs.
They surface at the boundaries: entry validation, persistence I/O,
configuration and the AI gateway.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class HaraError(Exception):
    """
    Base exception for all hara errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise HaraError(
            message="Failed to save check-in",
            operation="append_entry",
            context={"mode": "tap"}
        )
    """

    def __init__(
        self,
        message: str,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # Avoid conflict with logging's 'message' field
            "request_id": self.request_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for display layers"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (User Input)
# ==========================================

class ValidationError(HaraError):
    """
    Raised when check-in data fails validation at the entry store boundary

    Example:
        raise ValidationError(
            message="Unknown check-in mode",
            field="mode",
            value="dance"
        )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": value},
            **kwargs
        )


# ==========================================
# Storage Errors
# ==========================================

class StorageError(HaraError):
    """Local persistence could not be read or written"""

    def __init__(self, message: str, key: Optional[str] = None, **kwargs):
        self.key = key
        context = {"key": key}
        context.update(kwargs.pop("context", None) or {})
        super().__init__(
            message=message,
            user_message="We couldn't save your data on this device. Please check available storage.",
            context=context,
            **kwargs
        )


class EntryNotFoundError(HaraError):
    """Requested check-in entry does not exist"""

    def __init__(self, message: str, index: Optional[int] = None, **kwargs):
        self.index = index
        context = {"index": index}
        context.update(kwargs.pop("context", None) or {})
        super().__init__(
            message=message,
            user_message="That check-in no longer exists.",
            context=context,
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(HaraError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The app is not properly configured.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# External API Errors
# ==========================================

class ExternalAPIError(HaraError):
    """
    Base class for external API failures
    """

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs
    ):
        self.service = service
        self.status_code = status_code
        context = {"service": service, "status_code": status_code}
        context.update(kwargs.pop("context", None) or {})
        super().__init__(
            message=message,
            user_message=f"We're having trouble connecting to {service or 'an external service'}. Please try again later.",
            context=context,
            **kwargs
        )


class GutCoachError(ExternalAPIError):
    """AI text-generation gateway error"""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message=message,
            service="Gut Coach",
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def wrap_external_exception(
    error: Exception,
    operation: str,
    context: Optional[Dict[str, Any]] = None
) -> HaraError:
    """
    Wrap external exceptions (httpx, OSError) into our exception hierarchy

    Args:
        error: Original exception
        operation: What operation was being performed
        context: Additional context

    Returns:
        Appropriate HaraError subclass

    Example:
        try:
            path.write_text(payload)
        except OSError as e:
            raise wrap_external_exception(e, operation="save_store")
    """
    import httpx

    if isinstance(error, httpx.TimeoutException):
        return GutCoachError(
            message=f"API request timed out: {str(error)}",
            operation=operation,
            context=context,
            cause=error
        )
    elif isinstance(error, httpx.HTTPStatusError):
        return GutCoachError(
            message=f"API returned error: {error.response.status_code}",
            status_code=error.response.status_code,
            operation=operation,
            context=context,
            cause=error
        )
    elif isinstance(error, httpx.HTTPError):
        return GutCoachError(
            message=f"API request failed: {str(error)}",
            operation=operation,
            context=context,
            cause=error
        )
    elif isinstance(error, OSError):
        return StorageError(
            message=f"Storage I/O failed: {str(error)}",
            operation=operation,
            context=context,
            cause=error
        )

    # Generic fallback
    else:
        return HaraError(
            message=f"{operation} failed: {str(error)}",
            operation=operation,
            context=context,
            cause=error
        )
