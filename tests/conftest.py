# tests/conftest.py

from pathlib import Path

import pytest

from app import create_app, get_storage
from config import TestingConfig
from models import db


@pytest.fixture()
def app(tmp_path: Path):
    """
    App wired to a throwaway SQLite file.

    A file (rather than an in-memory database) keeps every connection of the
    pool looking at the same data.
    """
    config = {
        key: getattr(TestingConfig, key)
        for key in dir(TestingConfig)
        if key.isupper()
    }
    config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{tmp_path / 'tasks.db'}"
    app = create_app(config)
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def other_client(app):
    """Second browser: its own cookie jar, so its own session."""
    return app.test_client()


@pytest.fixture()
def storage(app):
    with app.app_context():
        yield get_storage()


def register(client, username="alice", password="secret123"):
    return client.post("/api/register", json={"username": username, "password": password})


def create_task(client, **body):
    body.setdefault("title", "Buy milk")
    return client.post("/api/tasks", json=body)
