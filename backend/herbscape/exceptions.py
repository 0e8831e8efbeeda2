"""
HerbScape Backend — Custom Exception Hierarchy
================================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a user-facing message and an optional
       context dict. Catalog components catch these at the call site and turn
       them into toasts; anything escaping a route is formatted by the global
       handlers registered in main.py.
Who:   Raised by services; caught by components and global handlers.

Exception Hierarchy:
    HerbScapeError (base)
    ├── ValidationError          → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    ├── RemoteFunctionError      → 503 Service Unavailable
    └── RemedyServiceError       → 503 Service Unavailable
"""

from typing import Any, Dict, Optional


class HerbScapeError(Exception):
    """
    Base exception for all HerbScape application errors.

    Attributes:
        message:  User-facing error description (safe to show in a toast)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(HerbScapeError):
    """
    Raised when client input fails validation.

    When:    Unsupported locale, missing access token, malformed request body.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(HerbScapeError):
    """
    Raised when the auth provider rejects an access token.

    When:    GET /auth/v1/user answers 401/403 (expired or forged token).
    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Your session has expired. Please sign in again.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(HerbScapeError):
    """
    Raised when a requested resource does not exist.

    When:    Remedy or auth endpoints requested while serving the basic catalog.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(HerbScapeError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost, table missing, query rejected.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. Detailed error
        info (SQL, constraint names) is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RemoteFunctionError(HerbScapeError):
    """
    Raised when a hosted backend function fails.

    What:    identify-plant or translate-plant answered with a non-2xx status,
             an undecodable body, or the request never reached the server.
    HTTP:    503 Service Unavailable

    Attributes:
        function_name: Name of the edge function that failed
        status_code:   HTTP status returned by the function (None on transport errors)
    """

    def __init__(
        self,
        function_name: str,
        message: str = "The remote service is temporarily unavailable",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["function"] = function_name
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.function_name = function_name
        self.status_code = status_code


class RemedyServiceError(HerbScapeError):
    """
    Raised when the remedies webhook cannot be reached.

    Only transport failures count: any HTTP answer, whatever its status, is
    displayed to the user as-is.
    HTTP:    503 Service Unavailable
    """

    def __init__(
        self,
        message: str = "Failed to connect to Remedies AI. Please try again.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
