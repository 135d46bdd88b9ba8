"""
Gunicorn configuration file for production.

Run from the repository root:
    gunicorn -c ci/gunicorn.conf.py compress_site.wsgi:application
"""

import os

# compress_site/ holds both the settings package and the ``src`` apps
pythonpath = "compress_site"

# Server socket
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")

# Page state lives in sessions stored in the default cache. With the default
# local-memory cache every worker has its own copy, so keep one worker unless
# CACHE_BACKEND points at a shared cache.
workers = int(os.environ.get("GUNICORN_WORKERS", 1))
worker_class = "sync"

# Timeouts
timeout = 120  # large PDFs are re-saved inside the request
graceful_timeout = 30
keepalive = 5

# Restart workers after N requests to bound memory held by PDF buffers
max_requests = 200
max_requests_jitter = 20

# Logging
accesslog = "-"  # stdout
errorlog = "-"  # stderr
loglevel = "info"
capture_output = True

access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

preload_app = False


def post_fork(server, worker):
    """Called just after a worker is forked."""
    server.log.info(f"Worker {worker.pid} spawned")


def worker_abort(worker):
    """Called when a worker receives SIGABRT, usually on timeout."""
    worker.log.error(f"Worker {worker.pid} was aborted (timeout or SIGABRT)")
