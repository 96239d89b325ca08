import logging

import click
from flask import Flask, current_app, g, jsonify, request
from werkzeug.exceptions import HTTPException

import auth
from config import Config
from errors import ApiError, Forbidden, NotFound
from forms import CredentialsForm, TaskForm, TaskUpdateForm
from logging_setup import setup_logging
from models import db
from seed import seed_demo_data
from storage import DatabaseStorage

logger = logging.getLogger(__name__)

# Ids beyond a signed 64-bit INTEGER cannot exist; the router answers 404.
MAX_TASK_ID = 2**63 - 1
TASK_URL = f"/api/tasks/<int(max={MAX_TASK_ID}):task_id>"


def get_storage() -> DatabaseStorage:
    return current_app.extensions["storage"]


def create_app(test_config=None, storage=None):
    """
    Application factory.

    ``test_config`` is a mapping applied on top of ``Config``. ``storage``
    replaces the default ``DatabaseStorage`` bound to ``db.session``.
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config is not None:
        app.config.update(test_config)

    db.init_app(app)
    app.extensions["storage"] = storage or DatabaseStorage(db.session)

    with app.app_context():
        db.create_all()
        if app.config["SEED_DEMO_DATA"]:
            seed_demo_data(get_storage())

    # -----------------------------
    # Authentication
    # -----------------------------

    @app.before_request
    def load_logged_in_user():
        """Resolve the session into ``g.user`` (None for anonymous callers)."""
        g.user = auth.current_user(get_storage())

    # -----------------------------
    # Auth routes
    # -----------------------------

    @app.post("/api/register")
    def register():
        form = CredentialsForm.from_json(request.get_json(silent=True)).validate_or_raise()
        user = auth.register(get_storage(), form.username.data, form.password.data)
        return jsonify(user.to_dict()), 201

    @app.post("/api/login")
    def login():
        form = CredentialsForm.from_json(request.get_json(silent=True)).validate_or_raise()
        user = auth.login(get_storage(), form.username.data, form.password.data)
        return jsonify(user.to_dict()), 200

    @app.post("/api/logout")
    def logout():
        auth.logout()
        return jsonify({"message": "Logged out"}), 200

    @app.get("/api/user")
    @auth.login_required
    def user_info(ctx):
        return jsonify(ctx.user.to_dict())

    # -----------------------------
    # Task routes
    # -----------------------------

    @app.get("/api/tasks")
    @auth.login_required
    def list_tasks(ctx):
        """
        Tasks of the logged-in user.

        Query string: ``search`` (title substring), ``status`` and
        ``sort`` ("desc" newest first, "asc" oldest first).
        """
        tasks = get_storage().list_tasks(
            ctx.user_id,
            search=request.args.get("search") or None,
            status=request.args.get("status") or None,
            sort=request.args.get("sort") or None,
        )
        return jsonify([task.to_dict() for task in tasks])

    @app.post("/api/tasks")
    @auth.login_required
    def create_task(ctx):
        form = TaskForm.from_json(request.get_json(silent=True)).validate_or_raise()
        task = get_storage().create_task(ctx.user_id, form.to_fields())
        return jsonify(task.to_dict()), 201

    @app.get(TASK_URL)
    @auth.login_required
    def get_task(ctx, task_id):
        task = get_storage().get_task(task_id)
        if task is None:
            raise NotFound("Task not found")
        if task.user_id != ctx.user_id:
            raise Forbidden()
        return jsonify(task.to_dict())

    @app.patch(TASK_URL)
    @auth.login_required
    def update_task(ctx, task_id):
        form = TaskUpdateForm.from_json(request.get_json(silent=True)).validate_or_raise()
        task = get_storage().update_task(task_id, ctx.user_id, form.to_fields())
        if task is None:
            raise NotFound("Task not found")
        return jsonify(task.to_dict())

    @app.delete(TASK_URL)
    @auth.login_required
    def delete_task(ctx, task_id):
        if not get_storage().delete_task(task_id, ctx.user_id):
            raise NotFound("Task not found")
        return "", 204

    # -----------------------------
    # Error handlers
    # -----------------------------

    @app.errorhandler(ApiError)
    def api_error(error):
        return jsonify({"message": error.message}), error.status_code

    @app.errorhandler(HTTPException)
    def http_error(error):
        # Unknown routes, wrong methods and the like
        return jsonify({"message": error.description}), error.code

    @app.errorhandler(Exception)
    def unexpected_error(error):
        logger.exception("unhandled error on %s %s", request.method, request.path)
        db.session.rollback()
        return jsonify({"message": "Internal server error"}), 500

    # -----------------------------
    # CLI
    # -----------------------------

    @app.cli.command("init-db")
    def init_db_command():
        """Create the database tables."""
        db.create_all()
        click.echo("Database tables created.")

    @app.cli.command("seed-demo")
    def seed_demo_command():
        """Create the demo user and its tasks."""
        user = seed_demo_data(get_storage())
        if user is None:
            click.echo("Demo user already exists.")
        else:
            click.echo(f"Created demo user '{user.username}'.")

    return app


if __name__ == "__main__":
    # Development server only. For production, run create_app() under a
    # WSGI server such as gunicorn.
    setup_logging(Config.LOG_LEVEL)
    app = create_app()
    try:
        app.run(debug=True)
    finally:
        with app.app_context():
            db.engine.dispose()
