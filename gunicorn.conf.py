# gunicorn configuration file
# Run with: gunicorn -c gunicorn.conf.py manage:app
import os

# Server socket
bind = f"0.0.0.0:{os.environ.get('PORT', '10000')}"

# Worker processes
workers = 2
worker_class = 'gthread'  # Use threads for I/O-bound applications
threads = 3
max_requests = 1000
max_requests_jitter = 100  # Add jitter to prevent all workers from restarting simultaneously

# Timeouts
timeout = 60
keepalive = 5

# Logging
accesslog = '-'  # Log to stdout
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(L)s'
errorlog = '-'  # Log to stderr
loglevel = 'info'
capture_output = True

# Process naming
proc_name = 'seatwatch'

# Every worker starts its own dispatch scheduler; the atomic queue pop keeps
# concurrent workers from emailing the same request twice.
reload = False
