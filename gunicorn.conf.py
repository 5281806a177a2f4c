"""
Production Server Configuration

Run the studio API with Uvicorn workers under Gunicorn.
"""

import multiprocessing
import os

# Server socket
bind = os.getenv("BIND", f"0.0.0.0:{os.getenv('API_PORT', '3000')}")
backlog = 2048

# Each worker owns its own connection pool (POSTGRES_POOL_SIZE + POSTGRES_MAX_OVERFLOW)
workers = int(os.getenv("WORKERS", min(multiprocessing.cpu_count() * 2 + 1, 4)))
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 1000
max_requests = 10000
max_requests_jitter = 1000
timeout = 120
keepalive = 5
graceful_timeout = 30

# Process naming
proc_name = "studio-backoffice-api"

# Server mechanics
daemon = False
pidfile = None

# Logging
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
accesslog = None
