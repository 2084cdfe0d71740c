"""
Application Exceptions

Faults raised by the infrastructure and the request pipeline. Expected
business outcomes are never raised; they travel as Result variants.
"""

from typing import Any, Dict, Optional


class ECommerceException(Exception):
    """Base exception for unexpected application faults.

    Carries a machine readable code and details so the HTTP boundary and
    the logs can report the fault without losing context.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class CacheException(ECommerceException):
    """Base exception for cache layer faults."""


class CacheStoreUnavailableException(CacheException):
    """Raised when the cache store cannot be reached."""

    def __init__(
        self,
        operation: str,
        key: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        details: Dict[str, Any] = {"operation": operation}
        if key:
            details["key"] = key
        if original_error:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__

        super().__init__(
            message=f"Cache store unavailable during '{operation}'",
            error_code="CACHE_STORE_UNAVAILABLE",
            details=details,
        )
        if original_error:
            self.__cause__ = original_error


class TransientDatabaseException(ECommerceException):
    """Raised for database faults that are safe to retry (lost connection)."""

    def __init__(self, message: str = "Transient database fault"):
        super().__init__(message=message, error_code="DB_TRANSIENT_ERROR")


class HandlerNotRegisteredException(ECommerceException):
    """Raised when a request is dispatched without a registered handler."""

    def __init__(self, request_type: type):
        super().__init__(
            message=f"No handler registered for {request_type.__name__}",
            error_code="HANDLER_NOT_REGISTERED",
            details={"request_type": request_type.__name__},
        )


class RequestRegistrationException(ECommerceException):
    """Raised at startup when a request type violates its capability contract."""

    def __init__(self, request_type: type, reason: str):
        super().__init__(
            message=f"Invalid registration for {request_type.__name__}: {reason}",
            error_code="REQUEST_REGISTRATION_ERROR",
            details={"request_type": request_type.__name__, "reason": reason},
        )
