"""
Wanderlust Backend — Custom Exception Hierarchy
=================================================

What:  Domain errors that carry an HTTP status code and a user-facing message.
Why:   Route handlers and services raise these instead of building error
       responses themselves; a single error handler (registered in main.py)
       turns every one of them into a rendered error page.
How:   Each exception stores `message`, `status_code` and an optional
       `context` dict. Context is logged server-side, never rendered.

Exception Hierarchy:
    WanderlustError (base)        → 500 Internal Server Error
    ├── ValidationError           → 400 Bad Request (payload failed the rules)
    ├── NotFoundError             → 404 Not Found (listing or review missing)
    ├── RouteNotFoundError        → 404 Not Found (no route matched)
    └── DatabaseError             → 500 Internal Server Error (storage failure)
"""

from typing import Any, Dict, Optional

DEFAULT_ERROR_MESSAGE = "Something went wrong!"


class WanderlustError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:      User-facing error description (rendered on the error page)
        status_code:  HTTP status the error handler responds with
        context:      Additional debug info (logged but NOT rendered)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = DEFAULT_ERROR_MESSAGE,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(WanderlustError):
    """
    Raised when a submitted listing or review payload fails validation.

    The message is every rule violation joined by a comma, e.g.
    '"listing.title" is required,"listing.price" must be a number'.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[list] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if errors:
            ctx["errors"] = list(errors)
        super().__init__(message=message, context=ctx)
        self.errors = list(errors or [])


class NotFoundError(WanderlustError):
    """
    Raised when a listing or review does not exist.

    SQLAlchemy returns None for missing rows; the services convert that None
    into this exception so the handler can answer 404.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found!", context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class RouteNotFoundError(WanderlustError):
    """Raised when no route matches the request method and path."""

    status_code = 404

    def __init__(self, path: Optional[str] = None, method: Optional[str] = None):
        ctx: Dict[str, Any] = {}
        if path:
            ctx["path"] = path
        if method:
            ctx["method"] = method
        super().__init__(message="Page not found!", context=ctx)


class DatabaseError(WanderlustError):
    """
    Raised when a database operation fails unexpectedly.

    The message is always generic; the SQL error is only logged.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
