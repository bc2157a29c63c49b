"""Tests for the office-aware log filter."""

import logging

from service_layer.core.logging import OfficeContextFilter
from service_layer.core.office_context import AuthenticatedUser, acting_as


def _record() -> logging.LogRecord:
    return logging.LogRecord("svc", logging.INFO, __file__, 1, "msg", None, None)


def test_filter_adds_office_of_authenticated_user() -> None:
    record = _record()
    with acting_as(AuthenticatedUser(id=1, office_id=7)):
        assert OfficeContextFilter().filter(record)
    assert record.office_id == 7


def test_filter_marks_anonymous_records() -> None:
    record = _record()
    assert OfficeContextFilter().filter(record)
    assert record.office_id == "-"
