import os

# Bind to the port provided via the PORT environment variable, defaulting to
# 5000.
bind = f"0.0.0.0:{os.getenv('PORT', '5000')}"

# The invoice listing cache lives in process memory and is invalidated by the
# worker that handled the write. Run a single worker so every request sees the
# same cache; use threads for concurrency instead.
workers = 1
threads = int(os.getenv("GUNICORN_THREADS", "4"))
timeout = 30
wsgi_app = "run:app"
