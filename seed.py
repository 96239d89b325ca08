import logging

from security import hash_password

logger = logging.getLogger(__name__)

DEMO_USERNAME = "demo"
DEMO_PASSWORD = "demo123"

DEMO_TASKS = (
    {
        "title": "Welcome to Task Manager",
        "description": "This is your first task. You can edit or delete it.",
        "status": "pending",
    },
    {
        "title": "In Progress Task",
        "description": "This task is currently being worked on.",
        "status": "in_progress",
    },
    {
        "title": "Completed Task",
        "description": "This task has been finished.",
        "status": "completed",
    },
)


def seed_demo_data(storage):
    """
    Create the demo user and its tasks unless the demo user already exists.

    Returns the new user, or None when there was nothing to do.
    """
    if storage.get_user_by_username(DEMO_USERNAME) is not None:
        logger.debug("demo user already present, skipping seed")
        return None

    user = storage.create_user(DEMO_USERNAME, hash_password(DEMO_PASSWORD))
    for fields in DEMO_TASKS:
        storage.create_task(user.id, dict(fields))
    logger.info("seeded demo user id=%s with %d tasks", user.id, len(DEMO_TASKS))
    return user
