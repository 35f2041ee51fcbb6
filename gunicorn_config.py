# gunicorn_config.py
# Usage: gunicorn -c gunicorn_config.py orgpanel.main:app
import multiprocessing
import os

bind = f"{os.getenv('APP_HOST', '0.0.0.0')}:{os.getenv('APP_PORT', '8000')}"

# Workers
workers = int(os.getenv("GUNICORN_WORKERS", multiprocessing.cpu_count()))
worker_class = "uvicorn.workers.UvicornWorker"

# Worker recycling
max_requests = 1000
max_requests_jitter = 100

accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

timeout = 60
graceful_timeout = 30

proc_name = "orgpanel-api"

raw_env = [
    "PYTHONUNBUFFERED=1",
]
