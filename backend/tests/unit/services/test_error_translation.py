"""Mapping of service errors onto HTTP API errors."""

from __future__ import annotations

import pytest
from vidhub.core import errors as api_errors
from vidhub.services._shared.base import BaseService
from vidhub.services._shared.errors import (
    AuthenticationError,
    BadRequestError,
    ConflictError,
    InternalError,
    NotFoundError,
    ServiceError,
)


@pytest.mark.parametrize(
    ("exc", "api_cls", "status", "message"),
    [
        (BadRequestError("Missing"), api_errors.BadRequest, 400, "Missing"),
        (ServiceError("plain"), api_errors.BadRequest, 400, "plain"),
        (AuthenticationError(), api_errors.Unauthorized, 401, "Unauthorized request"),
        (NotFoundError("User", 3), api_errors.NotFound, 404, "User not found: 3"),
        (
            NotFoundError("Channel", "x", message="Channel does not exist"),
            api_errors.NotFound,
            404,
            "Channel does not exist",
        ),
        (ConflictError("User", "Email in use"), api_errors.Conflict, 409, "Email in use"),
        (InternalError(), api_errors.InternalServerError, 500, "Something went wrong"),
    ],
)
def test_translate_exceptions(exc, api_cls, status, message):
    translated = BaseService.translate_exceptions(exc)
    assert isinstance(translated, api_cls)
    assert translated.status_code == status
    assert translated.message == message


def test_foreign_exceptions_pass_through():
    exc = KeyError("x")
    assert BaseService.translate_exceptions(exc) is exc
