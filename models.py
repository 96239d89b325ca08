from datetime import datetime, timezone
from typing import Optional

from flask_sqlalchemy import SQLAlchemy

# SQLAlchemy instance is created here and initialized in app.create_app()
db = SQLAlchemy()

TASK_STATUSES = ("pending", "in_progress", "completed")
DEFAULT_STATUS = "pending"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_utc(value: Optional[datetime]) -> Optional[str]:
    """SQLite hands datetimes back naive; they are always stored as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class User(db.Model):
    """
    Registered user.

    Only the salted password hash is stored. The unique constraint on
    ``username`` is the real guard against duplicate registrations; the
    lookup done before inserting only gives a friendlier error sooner.
    """

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "createdAt": isoformat_utc(self.created_at),
        }

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"


class Task(db.Model):
    """
    Task owned by exactly one user.

    Fields:
    - id: primary key
    - title: short title for the task (required)
    - description: optional longer text
    - status: pending / in_progress / completed (pending by default)
    - user_id: foreign key to the owner, never changed after creation
    - created_at: timestamp of creation (UTC)
    """

    __tablename__ = "tasks"
    __table_args__ = (
        db.CheckConstraint(
            "status IN ('pending', 'in_progress', 'completed')",
            name="ck_tasks_status",
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(20), nullable=False, default=DEFAULT_STATUS)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "userId": self.user_id,
            "createdAt": isoformat_utc(self.created_at),
        }

    def __repr__(self) -> str:
        return f"<Task id={self.id} user_id={self.user_id} status={self.status}>"
