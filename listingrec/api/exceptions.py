"""Custom exceptions for the ListingRec service.

Defines specific exception types for better error handling and reporting.
"""

from typing import Any, Dict, Optional


class ListingRecException(Exception):
    """Base exception for ListingRec errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code for API responses
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class ItemNotFoundError(ListingRecException):
    """Raised when an item id is not in the catalog."""

    def __init__(self, item_id: int, details: Optional[Dict[str, Any]] = None):
        message = f"Item not found with id: {item_id}"
        super().__init__(
            message=message,
            status_code=404,
            details=details or {"item_id": item_id},
        )


class UnauthorizedError(ListingRecException):
    """Raised when an operation needs a user identity and none was given."""

    def __init__(self, message: str = "Missing user identity"):
        super().__init__(message=message, status_code=401)


class CatalogUnavailableError(ListingRecException):
    """Raised when a catalog read fails."""

    def __init__(self, operation: str, error: Exception):
        message = f"Catalog read failed during {operation}: {str(error)}"
        super().__init__(
            message=message,
            status_code=503,
            details={
                "operation": operation,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )


class CatalogLoadError(ListingRecException):
    """Raised when catalog data fails to load."""

    def __init__(self, source: str, error: Exception):
        message = f"Failed to load catalog from '{source}': {str(error)}"
        super().__init__(
            message=message,
            status_code=500,
            details={
                "source": source,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )


class UserNotFoundError(ListingRecException):
    """Raised when an email does not belong to a registered user."""

    def __init__(self, email: str, details: Optional[Dict[str, Any]] = None):
        message = f"User not found with email: {email}"
        super().__init__(
            message=message,
            status_code=404,
            details=details or {"email": email},
        )
