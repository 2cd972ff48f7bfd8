"""WSGI proxy middleware configuration helper."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Wrap the WSGI app in :class:`ProxyFix` unless ``USE_PROXYFIX`` is off.

    Secure cookies depend on the scheme seen by Flask, so deployments behind
    a TLS-terminating proxy need ``X-Forwarded-Proto`` honoured.
    ``PROXYFIX_HOPS`` (default 1) sets how many hops are trusted.
    """
    if not app.config.get("USE_PROXYFIX", True):
        return
    hops = int(app.config.get("PROXYFIX_HOPS", 1))
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops, x_prefix=hops)
