# gunicorn.conf.py
import os
import logging
import sys
import multiprocessing

# Configure logging to stdout
accesslog = '-'
errorlog = '-'
loglevel = 'info'

port = os.getenv('PORT', '8080')
bind = f"0.0.0.0:{port}"

# Each worker owns its verse caches and background event loop, so fewer
# workers means fewer cold dataset loads
cores = multiprocessing.cpu_count()
workers = min(cores + 1, 4)
threads = 8  # Views block on the background loop while upstream I/O is outstanding

# Kept above REQUEST_BUDGET_SECONDS so a slow upstream surfaces as a 504, not a killed worker
timeout = 30
keepalive = 5
worker_class = "gthread"
graceful_timeout = 30

proc_name = "verse_proxy"
default_proc_name = "verse_proxy"

def on_starting(server):
    logger = logging.getLogger('gunicorn.error')
    logger.setLevel(logging.INFO)
    logger.addHandler(logging.StreamHandler(sys.stdout))
    logger.info(f"Starting gunicorn with {workers} workers x {threads} threads on port {port}")
    logger.info(f"Worker timeout set to {timeout} seconds")
