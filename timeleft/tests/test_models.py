"""Unit tests for the task and group schemas."""

import pytest
from datetime import date, datetime, timedelta, timezone
from pydantic import ValidationError as PydanticValidationError
from timeleft.models import Task, TaskGroup, TaskPriority, RepeatType
from timeleft.schemas.group import TaskGroupCreate, TaskGroupRead
from timeleft.schemas.task import TaskCreate, TaskRead, TaskUpdate, coerce_datetime


def test_task_create_minimal():
    """Test creating a task with only a title."""
    task = TaskCreate(title="Test Task")

    assert task.title == "Test Task"
    assert task.description is None
    assert task.completed is False
    assert task.priority == TaskPriority.NORMAL
    assert task.group_id is None
    assert task.reminder_enabled is False
    assert task.repeat_enabled is False
    assert task.repeat_interval is None


def test_task_create_accepts_camel_case():
    """Test that boundary keys in camelCase populate snake_case fields."""
    task = TaskCreate.model_validate({
        "title": "Pay rent",
        "dueDate": "2026-03-01T09:00:00",
        "listName": "Home",
        "repeatEnabled": True,
        "repeatType": "monthly",
        "repeatInterval": 1,
    })

    assert task.due_date == datetime(2026, 3, 1, 9, 0)
    assert task.list_name == "Home"
    assert task.repeat_type == RepeatType.MONTHLY


def test_task_create_trims_strings():
    """Test that title and description are whitespace-trimmed."""
    task = TaskCreate(title="  Buy milk  ", description="  two litres ")

    assert task.title == "Buy milk"
    assert task.description == "two litres"


def test_priority_defaults_and_case():
    """Test that a missing priority becomes normal and case is ignored."""
    assert TaskCreate(title="a", priority=None).priority == TaskPriority.NORMAL
    assert TaskCreate(title="a", priority="HIGH").priority == TaskPriority.HIGH


def test_unknown_priority_is_rejected():
    """Test that an unknown priority is an error, not a silent default."""
    with pytest.raises(PydanticValidationError):
        TaskCreate(title="a", priority="urgent")


def test_unknown_field_is_rejected():
    """Test that unexpected keys are refused."""
    with pytest.raises(PydanticValidationError):
        TaskCreate.model_validate({"title": "a", "colour": "red"})


def test_coerce_datetime_representations():
    """Test that strings, dates and datetimes normalize the same way."""
    expected = datetime(2026, 3, 5, 0, 0)

    assert coerce_datetime("2026-03-05") == expected
    assert coerce_datetime(date(2026, 3, 5)) == expected
    assert coerce_datetime(expected) == expected
    assert coerce_datetime("") is None
    assert coerce_datetime(None) is None


def test_coerce_datetime_aware_becomes_local_naive():
    """Test that aware datetimes are converted to naive local time."""
    aware = datetime(2026, 3, 5, 12, 0, tzinfo=timezone.utc)
    result = coerce_datetime(aware)

    assert result.tzinfo is None
    assert result == aware.astimezone().replace(tzinfo=None)
    assert coerce_datetime("2026-03-05T12:00:00Z") == result


def test_coerce_datetime_rejects_garbage():
    """Test that an unparsable string is an error naming the field."""
    with pytest.raises(ValueError, match="Invalid due date"):
        coerce_datetime("next tuesday-ish", "due date")


def test_task_update_only_dumps_set_fields():
    """Test that a partial update only carries the fields it was given."""
    update = TaskUpdate(title="New title", groupId=None)

    assert update.model_dump(exclude_unset=True) == {"title": "New title", "group_id": None}


def test_group_create_color_pattern():
    """Test hex colour validation for groups."""
    assert TaskGroupCreate(name="Work", color="#fff").color == "#fff"
    assert TaskGroupCreate(name="Work", color="#A1B2C3").color == "#A1B2C3"

    for bad in ("red", "#12345", "123456", "#GGGGGG"):
        with pytest.raises(PydanticValidationError):
            TaskGroupCreate(name="Work", color=bad)


def test_task_read_serialization():
    """Test that read records dump to camelCase JSON with string ids."""
    now = datetime(2026, 3, 1, 8, 30)
    group = TaskGroup(id="g1", name="Work", color="#fff", created_at=now, updated_at=now)
    task = Task(id="t1", title="Report", group_id="g1", due_date=now + timedelta(days=1),
                created_at=now, updated_at=now)

    record = TaskRead.model_validate({
        **task.model_dump(),
        "group": TaskGroupRead.model_validate({**group.model_dump(), "task_count": 1}),
    }).model_dump(mode="json", by_alias=True)

    assert record["id"] == "t1"
    assert record["groupId"] == "g1"
    assert record["dueDate"] == "2026-03-02T08:30:00"
    assert record["priority"] == "normal"
    assert record["group"]["name"] == "Work"
    assert record["isOverdue"] is False
