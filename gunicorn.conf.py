# gunicorn.conf.py
import os
import logging
import sys
import multiprocessing

# Application factory; the corpus is loaded once in the master before forking
wsgi_app = "app:create_app()"
preload_app = True

# Configure logging to stdout
accesslog = '-'
errorlog = '-'
loglevel = os.getenv('LOG_LEVEL', 'info').lower()

# Get PORT from environment or use default
port = os.getenv('PORT', '8080')
bind = f"0.0.0.0:{port}"

# Queries are CPU bound scans over an in-memory corpus
cores = multiprocessing.cpu_count()
workers = min(cores + 1, 4)
threads = 2


def on_starting(server):
    logger = logging.getLogger('gunicorn.error')
    logger.setLevel(logging.INFO)
    logger.addHandler(logging.StreamHandler(sys.stdout))
    logger.info(f"Starting gunicorn with {workers} workers on port {port}")


timeout = 60
keepalive = 5
worker_class = "gthread"

# Process naming
proc_name = "scriptures"
default_proc_name = "scriptures"

graceful_timeout = 30
