# tests/test_seed.py

from app import create_app
from config import TestingConfig
from seed import DEMO_PASSWORD, DEMO_USERNAME, seed_demo_data


def test_seed_is_idempotent(storage) -> None:
    user = seed_demo_data(storage)
    assert user is not None
    assert seed_demo_data(storage) is None

    tasks = storage.list_tasks(user.id)
    assert sorted(t.status for t in tasks) == ["completed", "in_progress", "pending"]


def test_app_seeds_on_startup_when_enabled(tmp_path) -> None:
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": TestingConfig.SECRET_KEY,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'seeded.db'}",
            "SEED_DEMO_DATA": True,
        }
    )
    client = app.test_client()

    resp = client.post(
        "/api/login", json={"username": DEMO_USERNAME, "password": DEMO_PASSWORD}
    )
    assert resp.status_code == 200
    assert len(client.get("/api/tasks").get_json()) == 3


def test_seed_cli_command(app) -> None:
    runner = app.test_cli_runner()

    result = runner.invoke(args=["seed-demo"])
    assert "Created demo user 'demo'" in result.output

    result = runner.invoke(args=["seed-demo"])
    assert "already exists" in result.output
