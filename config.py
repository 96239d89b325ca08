"""
Configuration classes for the task tracker.

Values come from environment variables so secrets never live in the code.
``create_app`` loads ``Config`` and then applies any overrides it was given.
"""

import os
from datetime import timedelta


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


class Config:
    # In a real deployment, always set SECRET_KEY in the environment.
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///tasks.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session cookie: signed by Flask, not readable from JavaScript
    PERMANENT_SESSION_LIFETIME = timedelta(days=_env_int("SESSION_LIFETIME_DAYS", 7))
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    # Log out after this many idle minutes (0 disables the check)
    SESSION_IDLE_MINUTES = _env_int("SESSION_IDLE_MINUTES", 0)

    SEED_DEMO_DATA = _env_bool("SEED_DEMO_DATA", True)
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "testing-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SEED_DEMO_DATA = False
    SESSION_IDLE_MINUTES = 0
