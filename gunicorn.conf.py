"""Gunicorn configuration for the scheduling API (uvicorn workers)."""
import multiprocessing
import os

# Application
wsgi_app = "programador.main:app"

# Server Socket
bind = os.getenv("BIND", "0.0.0.0:8000")
backlog = 2048

# Worker Processes
workers = int(os.getenv("WEB_CONCURRENCY", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"
max_requests = 1000
max_requests_jitter = 50
timeout = int(os.getenv("GUNICORN_TIMEOUT", "120"))
graceful_timeout = 30

# Logging
accesslog = "-"  # Log to stdout
errorlog = "-"   # Log to stderr
loglevel = os.getenv("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s %(t)s "%(r)s" %(s)s %(b)s %(D)s'

# Process Naming
proc_name = "programador-horarios"

preload_app = True


def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Programador de Horarios listening on %s", bind)


def post_fork(server, worker):
    """Called just after a worker has been forked."""
    server.log.info("Worker spawned (pid: %s)", worker.pid)


def worker_abort(worker):
    """Called when a worker is killed."""
    worker.log.warning("Worker received SIGABRT signal (pid: %s)", worker.pid)


def on_starting(server):
    """Apply pending migrations once in the master when RUN_MIGRATIONS=1."""
    if os.getenv("RUN_MIGRATIONS") != "1":
        return
    from alembic import command
    from alembic.config import Config

    command.upgrade(Config(os.path.join(os.path.dirname(os.path.abspath(__file__)), "alembic.ini")), "head")
    server.log.info("Database schema upgraded to head")
