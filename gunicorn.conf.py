"""
Gunicorn configuration for the placement workflow API.

    gunicorn campus_placement.main:app -c gunicorn.conf.py
"""
import os

# Server socket
bind = os.getenv("BIND", "0.0.0.0:8000")
backlog = 1024

# Worker processes
# Workers share no state; every transition is serialized by the database
workers = int(os.getenv("GUNICORN_WORKERS", 2))
worker_class = "uvicorn.workers.UvicornWorker"

# Worker lifecycle
max_requests = 1000
max_requests_jitter = 100

# Timeouts
timeout = 30
keepalive = 5
graceful_timeout = 30

# Process naming
proc_name = "campus_placement_api"

daemon = False  # Docker / systemd handles this

# Logging
accesslog = "-"  # Log to stdout
errorlog = "-"   # Log to stderr
loglevel = os.getenv("LOG_LEVEL", "info").lower()


def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Placement API ready, spawning %s workers", workers)


def worker_abort(worker):
    """Called when a worker is aborted (usually a request timeout)."""
    worker.log.info("Worker %s aborted", worker.pid)
