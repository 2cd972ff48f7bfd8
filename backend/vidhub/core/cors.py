"""CORS configuration helper for API resources."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from vidhub.core.logger import REQUEST_ID_HEADER


def init_app(app: Flask) -> None:
    """Configure CORS for API endpoints based on application config.

    Parameters
    ----------
    app: flask.Flask
        Application whose ``CORS_ORIGINS`` and ``CORS_MAX_AGE`` settings are
        consulted. Credential cookies are only allowed for an explicit origin
        list; a blank value or ``"*"`` opens the API to any origin without
        credentials.
    """
    raw_origins = app.config.get("CORS_ORIGINS", "")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    allow_any = not origins or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if allow_any else origins}},
        supports_credentials=not allow_any,
        expose_headers=[REQUEST_ID_HEADER],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
