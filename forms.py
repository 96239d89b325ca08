"""
Request validation for the JSON API.

These forms are the API contract. They are declared on their own, not
derived from the table columns, and ``to_fields()`` maps validated form data
onto storage field names. Bodies are JSON objects, so forms are built with
``from_json()`` instead of reading ``request.form``.
"""

from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import PasswordField, SelectField, StringField
from wtforms.validators import AnyOf, DataRequired, Length, StopValidation

from errors import ValidationFailed
from models import DEFAULT_STATUS, TASK_STATUSES

STATUS_MESSAGE = "Status must be one of: " + ", ".join(TASK_STATUSES)


class IsString:
    """Reject JSON values of the wrong type (numbers, lists, objects)."""

    def __init__(self, message=None, allow_null=False):
        self.message = message
        self.allow_null = allow_null

    def __call__(self, form, field):
        if not field.raw_data:
            return
        value = field.raw_data[0]
        if value is None and self.allow_null:
            raise StopValidation()
        if not isinstance(value, str):
            raise StopValidation(self.message or f"{field.label.text} must be a string")


class IfPresent:
    """
    Skip the remaining validators when the key is missing from the body.

    Unlike ``Optional``, an empty string still counts as present, so
    ``{"title": ""}`` is validated (and rejected) rather than ignored.
    """

    field_flags = {"optional": True}

    def __call__(self, form, field):
        if not field.raw_data:
            field.errors[:] = []
            raise StopValidation()


class ApiForm(FlaskForm):
    """Base form for JSON bodies. Authentication is the session cookie."""

    class Meta:
        csrf = False

    @classmethod
    def from_json(cls, payload):
        if not isinstance(payload, dict):
            raise ValidationFailed("Request body must be a JSON object")
        form = cls(formdata=MultiDict(list(payload.items())))
        form.present = frozenset(payload)
        return form

    def validate_or_raise(self):
        if not self.validate():
            raise ValidationFailed(self.first_error())
        return self

    def first_error(self) -> str:
        """Message of the first failing field, in declaration order."""
        for errors in self.errors.values():
            if errors:
                return errors[0]
        return "Invalid request"


class CredentialsForm(ApiForm):
    """Username and password, used for both registration and login."""

    username = StringField(
        "Username",
        validators=[
            IsString(),
            DataRequired(message="Username is required"),
            Length(max=80, message="Username must be at most 80 characters"),
        ],
    )
    password = PasswordField(
        "Password",
        validators=[
            IsString(),
            DataRequired(message="Password is required"),
        ],
    )


class TaskForm(ApiForm):
    """
    Body of ``POST /api/tasks``.

    The title is required. Status falls back to "pending" when missing.
    """

    title = StringField(
        "Title",
        validators=[
            IsString(),
            DataRequired(message="Title is required"),
            Length(max=200, message="Title must be at most 200 characters"),
        ],
    )
    description = StringField(
        "Description",
        validators=[
            IsString(allow_null=True),
            Length(max=2000, message="Description must be at most 2000 characters"),
        ],
    )
    status = SelectField(
        "Status",
        choices=[(s, s) for s in TASK_STATUSES],
        default=DEFAULT_STATUS,
        validate_choice=False,
        validators=[IsString(message=STATUS_MESSAGE), AnyOf(TASK_STATUSES, message=STATUS_MESSAGE)],
    )

    def to_fields(self) -> dict:
        description = self.description.data
        return {
            "title": self.title.data,
            "description": description if description else None,
            "status": self.status.data,
        }


class TaskUpdateForm(ApiForm):
    """
    Body of ``PATCH /api/tasks/<id>``.

    Same rules as TaskForm, but every field is optional and only the keys
    present in the body are validated and applied. ``description: null``
    clears the description.
    """

    title = StringField(
        "Title",
        validators=[
            IfPresent(),
            IsString(),
            DataRequired(message="Title is required"),
            Length(max=200, message="Title must be at most 200 characters"),
        ],
    )
    description = StringField(
        "Description",
        validators=[
            IfPresent(),
            IsString(allow_null=True),
            Length(max=2000, message="Description must be at most 2000 characters"),
        ],
    )
    status = SelectField(
        "Status",
        choices=[(s, s) for s in TASK_STATUSES],
        validate_choice=False,
        validators=[
            IfPresent(),
            IsString(message=STATUS_MESSAGE),
            AnyOf(TASK_STATUSES, message=STATUS_MESSAGE),
        ],
    )

    def to_fields(self) -> dict:
        fields = {}
        if "title" in self.present:
            fields["title"] = self.title.data
        if "description" in self.present:
            fields["description"] = self.description.data or None
        if "status" in self.present:
            fields["status"] = self.status.data
        return fields
