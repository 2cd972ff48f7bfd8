import os

wsgi_app = "vidhub:create_app()"

# Bind & workers
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = int(os.getenv("GUNICORN_THREADS", "1"))
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr; app records are already JSON lines
accesslog = None
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Trust forwarded headers; ProxyFix does the per-request work
forwarded_allow_ips = "*"
proxy_protocol = False
