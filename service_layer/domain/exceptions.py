"""Domain exceptions for the service layer.

Defines the errors the cached service layer raises or lets through.
The service layer never recovers from them; the presentation layer
maps them to HTTP responses in core.exception_handlers.
"""

from typing import Any


class ServiceLayerException(Exception):
    """Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. resource_id, context).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the exception handlers."""
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class AuthorizationException(ServiceLayerException):
    """Raised when the caller lacks permission for the operation."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
        error_code: str = "PERMISSION_DENIED",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'invoice').
            action: Optional action that was attempted (e.g. 'delete').
            message: Human-readable message; default used when resource/action omitted.
            error_code: Machine-readable code for subclasses.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, error_code, details)


class UnauthorizedUserException(AuthorizationException):
    """Raised when no authenticated user (and so no office) is available."""

    def __init__(
        self, message: str = "User does not have permission to perform this action"
    ) -> None:
        super().__init__(message=message, error_code="UNAUTHORIZED_USER")


class ResourceNotFoundException(ServiceLayerException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (repository model name).
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class InvalidContextException(ServiceLayerException):
    """Raised when an extra cache context outside the service whitelist is requested."""

    def __init__(self, context: str, allowed: tuple[str, ...] = ()) -> None:
        """Initialize with the rejected context name.

        Args:
            context: The extra context that was requested.
            allowed: The contexts the service accepts.
        """
        super().__init__(
            f"Invalid cache context: {context}",
            "INVALID_CONTEXT",
            {"context": context, "allowed": list(allowed)},
        )


class InvalidQueryParameterException(ServiceLayerException):
    """Raised when a query parameter (e.g. limit, page) is not a positive integer."""

    def __init__(self, name: str, value: Any) -> None:
        super().__init__(
            f"Invalid value for {name}: {value!r}",
            "INVALID_QUERY_PARAMETER",
            {"parameter": name, "value": str(value)},
        )
