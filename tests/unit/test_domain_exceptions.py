"""Tests for service layer exceptions (error_code, message, details)."""

from service_layer.domain.exceptions import (
    AuthorizationException,
    InvalidContextException,
    InvalidQueryParameterException,
    ResourceNotFoundException,
    ServiceLayerException,
    UnauthorizedUserException,
)
from service_layer.infrastructure.exceptions import CacheException, CacheUnavailableError


def test_service_layer_exception_default_error_code() -> None:
    """Base exception uses class name as error_code when not provided."""
    exc = ServiceLayerException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "ServiceLayerException"
    assert exc.details == {}
    assert str(exc) == "Something failed"


def test_service_layer_exception_custom_error_code_and_details() -> None:
    exc = ServiceLayerException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.error_code == "CUSTOM"
    assert exc.details == {"key": "value"}


def test_to_dict_omits_empty_details() -> None:
    assert ServiceLayerException("Oops", "CUSTOM").to_dict() == {
        "error": "CUSTOM",
        "message": "Oops",
    }


def test_to_dict_includes_details() -> None:
    body = ResourceNotFoundException("Invoice", "42").to_dict()
    assert body["error"] == "RESOURCE_NOT_FOUND"
    assert body["details"] == {"resource_type": "Invoice", "resource_id": "42"}


def test_authorization_exception_with_resource_and_action() -> None:
    exc = AuthorizationException(resource="invoice", action="delete")
    assert exc.message == "Permission denied: delete on invoice"
    assert exc.error_code == "PERMISSION_DENIED"
    assert exc.details == {"resource": "invoice", "action": "delete"}


def test_authorization_exception_default_message() -> None:
    exc = AuthorizationException()
    assert exc.message == "Permission denied"
    assert exc.details == {}


def test_unauthorized_user_exception() -> None:
    """Raised when no office can be resolved; still an AuthorizationException."""
    exc = UnauthorizedUserException()
    assert isinstance(exc, AuthorizationException)
    assert exc.error_code == "UNAUTHORIZED_USER"
    assert exc.message == "User does not have permission to perform this action"


def test_resource_not_found_exception() -> None:
    exc = ResourceNotFoundException("Widget", "7")
    assert exc.message == "Widget not found: 7"
    assert exc.error_code == "RESOURCE_NOT_FOUND"


def test_invalid_context_exception_lists_allowed() -> None:
    exc = InvalidContextException("report", ("paginate",))
    assert exc.message == "Invalid cache context: report"
    assert exc.error_code == "INVALID_CONTEXT"
    assert exc.details == {"context": "report", "allowed": ["paginate"]}


def test_cache_unavailable_error() -> None:
    exc = CacheUnavailableError("redis", "get")
    assert isinstance(exc, CacheException)
    assert isinstance(exc, ServiceLayerException)
    assert exc.error_code == "CACHE_UNAVAILABLE"
    assert exc.details == {"backend": "redis", "operation": "get"}


def test_invalid_query_parameter_details() -> None:
    exc = InvalidQueryParameterException("limit", "abc")
    assert exc.error_code == "INVALID_QUERY_PARAMETER"
    assert exc.message == "Invalid value for limit: 'abc'"
    assert exc.details == {"parameter": "limit", "value": "abc"}
