# tests/test_forms.py

import pytest

from errors import ValidationFailed
from forms import CredentialsForm, TaskForm, TaskUpdateForm


@pytest.fixture()
def request_ctx(app):
    with app.test_request_context():
        yield


def test_task_form_maps_to_storage_fields(request_ctx) -> None:
    form = TaskForm.from_json({"title": "  Walk dog  ", "description": ""})
    form.validate_or_raise()

    assert form.to_fields() == {
        "title": "  Walk dog  ",
        "description": None,
        "status": "pending",
    }


def test_task_form_ignores_unknown_keys(request_ctx) -> None:
    form = TaskForm.from_json({"title": "x", "userId": 99, "id": 7})
    form.validate_or_raise()
    assert set(form.to_fields()) == {"title", "description", "status"}


def test_update_form_only_maps_present_keys(request_ctx) -> None:
    form = TaskUpdateForm.from_json({"status": "completed"})
    form.validate_or_raise()
    assert form.to_fields() == {"status": "completed"}

    form = TaskUpdateForm.from_json({})
    form.validate_or_raise()
    assert form.to_fields() == {}


def test_update_form_rejects_blank_title(request_ctx) -> None:
    with pytest.raises(ValidationFailed) as exc:
        TaskUpdateForm.from_json({"title": " "}).validate_or_raise()
    assert exc.value.message == "Title is required"
    assert exc.value.status_code == 400


def test_length_limits(request_ctx) -> None:
    with pytest.raises(ValidationFailed) as exc:
        TaskForm.from_json({"title": "x" * 201}).validate_or_raise()
    assert exc.value.message == "Title must be at most 200 characters"

    with pytest.raises(ValidationFailed) as exc:
        CredentialsForm.from_json({"username": "u" * 81, "password": "p"}).validate_or_raise()
    assert exc.value.message == "Username must be at most 80 characters"


def test_non_object_body(request_ctx) -> None:
    for payload in (None, [], "title", 3):
        with pytest.raises(ValidationFailed):
            TaskForm.from_json(payload)
