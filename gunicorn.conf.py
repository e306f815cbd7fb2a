"""
Gunicorn configuration for production: gunicorn -c gunicorn.conf.py main:app
"""
import multiprocessing
import os
from pathlib import Path

from framework.config import settings

LOG_DIR = Path(settings.LOG_DIR)
LOG_DIR.mkdir(parents=True, exist_ok=True)

bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")

# One async worker per core by default; each request gets its own session
workers = int(os.getenv("GUNICORN_WORKERS", multiprocessing.cpu_count()))
worker_class = "uvicorn.workers.UvicornWorker"
max_requests = 1000
max_requests_jitter = 50
timeout = 60
graceful_timeout = 30
keepalive = 5

proc_name = (settings.GUNICORN_PROC_NAME or settings.APP_NAME.lower().replace(" ", "-"))[:32]

accesslog = str(LOG_DIR / "gunicorn_access.log")
errorlog = str(LOG_DIR / "gunicorn_error.log")
loglevel = "info"

# Each worker builds its own engine pool after fork
preload_app = False

def when_ready(server):
    server.log.info("%s is ready. Listening on %s", settings.APP_NAME, server.address)

def post_fork(server, worker):
    server.log.info("Worker spawned (pid: %s)", worker.pid)
