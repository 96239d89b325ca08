import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from errors import DuplicateUsername
from models import DEFAULT_STATUS, Task, User

logger = logging.getLogger(__name__)

TASK_FIELDS = ("title", "description", "status")


def _like_pattern(term: str) -> str:
    """Literal substring pattern for LIKE, with wildcards in the term escaped."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class DatabaseStorage:
    """
    Users and tasks on top of a SQLAlchemy session.

    The session is passed in (the app uses Flask-SQLAlchemy's request scoped
    ``db.session``; tests may pass any other session). Every mutating call
    commits on its own, so each one is a single atomic store operation.

    Task reads by id are not owner-scoped; ownership checks for them belong
    to the caller. Updates and deletes only ever touch rows that match both
    the task id and the owner id.
    """

    def __init__(self, session):
        self.session = session

    # ---- users ----

    def get_user(self, user_id):
        return self.session.get(User, user_id)

    def get_user_by_username(self, username):
        return self.session.execute(
            select(User).where(User.username == username)
        ).scalar_one_or_none()

    def create_user(self, username: str, password_hash: str) -> User:
        user = User(username=username, password_hash=password_hash)
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same name.
            self.session.rollback()
            raise DuplicateUsername()
        return user

    # ---- tasks ----

    def get_task(self, task_id):
        return self.session.get(Task, task_id)

    def list_tasks(self, owner_id, search=None, status=None, sort=None):
        """
        Tasks owned by ``owner_id``, filtered and sorted.

        - search: case-insensitive substring of the title
        - status: exact status match
        - sort: "desc" newest first, "asc" oldest first, otherwise by id
        """
        query = select(Task).where(Task.user_id == owner_id)

        if search:
            query = query.where(Task.title.ilike(_like_pattern(search), escape="\\"))

        if status:
            query = query.where(Task.status == status)

        if sort == "desc":
            query = query.order_by(Task.created_at.desc(), Task.id.desc())
        elif sort == "asc":
            query = query.order_by(Task.created_at.asc(), Task.id.asc())
        else:
            query = query.order_by(Task.id.asc())

        return list(self.session.execute(query).scalars())

    def create_task(self, owner_id, fields: dict) -> Task:
        task = Task(
            title=fields["title"],
            description=fields.get("description"),
            status=fields.get("status") or DEFAULT_STATUS,
            user_id=owner_id,
        )
        self.session.add(task)
        self.session.commit()
        logger.info("task created id=%s user_id=%s", task.id, owner_id)
        return task

    def update_task(self, task_id, owner_id, fields: dict):
        """Apply the supplied fields; None if no task has this id and owner."""
        task = self.session.execute(
            select(Task).where(Task.id == task_id, Task.user_id == owner_id)
        ).scalar_one_or_none()
        if task is None:
            return None

        for name in TASK_FIELDS:
            if name in fields:
                setattr(task, name, fields[name])
        self.session.commit()
        logger.info("task updated id=%s fields=%s", task.id, sorted(fields))
        return task

    def delete_task(self, task_id, owner_id) -> bool:
        result = self.session.execute(
            delete(Task).where(Task.id == task_id, Task.user_id == owner_id)
        )
        self.session.commit()
        deleted = result.rowcount > 0
        if deleted:
            logger.info("task deleted id=%s user_id=%s", task_id, owner_id)
        return deleted
