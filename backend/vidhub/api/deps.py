"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import os
import time
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request
from werkzeug.utils import secure_filename

from vidhub.core.errors import Unauthorized
from vidhub.core.security import get_codec
from vidhub.services._shared.base import ServiceContext
from vidhub.services._shared.ports import CredentialError, TokenType

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "bearer "


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def api_response(data: Any = None, message: str = "Success", *, status: int = 200) -> Response:
    """Wrap ``data`` in the success envelope shared by every endpoint."""

    return json_response(
        {"statusCode": status, "data": data, "message": message, "success": True},
        status=status,
    )


# --------------------------------------------------------------------------- #
# Access-token authentication
# --------------------------------------------------------------------------- #


def _presented_access_token() -> str | None:
    """Return the access token from the ``Authorization`` header or its cookie."""

    header = request.headers.get("Authorization", "")
    if header[: len(BEARER_PREFIX)].lower() == BEARER_PREFIX:
        token = header[len(BEARER_PREFIX) :].strip()
        if token:
            return token
    cookie_name = current_app.config.get("JWT_ACCESS_COOKIE_NAME", "accessToken")
    return request.cookies.get(cookie_name) or None


def _authenticate(*, optional: bool) -> None:
    token = _presented_access_token()
    if token is None:
        if optional:
            g.user_id = None
            return
        raise Unauthorized("Unauthorized request")
    try:
        g.user_id = get_codec().verify(token, TokenType.ACCESS)
    except CredentialError as exc:
        current_app.logger.info("access token rejected: %s", type(exc).__name__)
        raise Unauthorized("Invalid access token") from exc


def require_auth(func: F) -> F:
    """Ensure the request carries a valid access token; sets ``g.user_id``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        _authenticate(optional=False)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def optional_auth(func: F) -> F:
    """Authenticate when a token is presented; anonymous otherwise.

    A presented but invalid token is still rejected with ``401``.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        _authenticate(optional=True)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_user_id() -> int:
    user_id = g.get("user_id")
    if user_id is None:
        raise Unauthorized("Unauthorized request")
    return int(user_id)


def service_context() -> ServiceContext:
    """Build the request-scoped context handed to services."""

    return ServiceContext(actor_id=g.get("user_id"), request_id=g.get("request_id"))


# --------------------------------------------------------------------------- #
# Multipart uploads
# --------------------------------------------------------------------------- #


@contextmanager
def staged_upload(field: str) -> Iterator[str | None]:
    """Save the uploaded file under ``UPLOAD_TMP_DIR`` for the duration of the block.

    Yields ``None`` when the field is absent or empty. The staged copy is
    removed on exit if the media client has not already consumed it.
    """

    storage = request.files.get(field)
    if storage is None or not storage.filename:
        yield None
        return

    tmp_dir = current_app.config["UPLOAD_TMP_DIR"]
    os.makedirs(tmp_dir, exist_ok=True)
    name = secure_filename(storage.filename) or "upload"
    path = os.path.join(tmp_dir, f"{uuid.uuid4().hex}_{name}")
    storage.save(path)
    try:
        yield path
    finally:
        if os.path.exists(path):
            os.remove(path)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
