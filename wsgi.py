from app import create_app
from config import Config
from logging_setup import setup_logging

# Entry point for WSGI servers, e.g. `gunicorn wsgi:app`
setup_logging(Config.LOG_LEVEL)
app = create_app()
