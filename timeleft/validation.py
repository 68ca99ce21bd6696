"""Field rules and read-time derived state for tasks and groups.

Everything here is pure: no store access. Checks that need the store
(group existence, name uniqueness) live in the repositories.
"""

import random
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError, Violation
from .models import GROUP_COLORS
from .schemas.group import TaskGroupCreate
from .schemas.task import TaskCreate

# pydantic error type -> constraint key reported to callers
_CONSTRAINTS = {
    "missing": "required",
    "string_too_short": "min_length",
    "string_too_long": "max_length",
    "string_pattern_mismatch": "format",
    "enum": "enum",
    "greater_than_equal": "min",
    "less_than_equal": "max",
    "extra_forbidden": "unknown",
    "value_error": "invalid",
    "datetime_parsing": "invalid",
    "datetime_from_date_parsing": "invalid",
    "datetime_type": "invalid",
}


def _violations(exc: PydanticValidationError) -> List[Violation]:
    out = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "__root__"
        constraint = _CONSTRAINTS.get(err["type"], err["type"])
        if constraint == "min_length" and err.get("ctx", {}).get("min_length") == 1:
            constraint = "required"
        message = err["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        out.append(Violation(field, constraint, message))
    return out


def to_field_names(model: Type[BaseModel], data: Mapping[str, Any]) -> Dict[str, Any]:
    """Map camelCase keys onto the model's snake_case field names.

    Unknown keys are kept so that validation can report them.
    """
    names = {}
    for name, info in model.model_fields.items():
        names[name] = name
        if info.alias:
            names[info.alias] = name
    return {names.get(key, key): value for key, value in data.items()}


def normalize_group_id(value: Any) -> Optional[str]:
    """A non-empty string is a group reference; anything else means "no group"."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def pick_group_color(rng: Any = random) -> str:
    return rng.choice(GROUP_COLORS)


def _task_rules(task: TaskCreate) -> List[Violation]:
    out = []
    if task.repeat_enabled and not (task.repeat_interval and task.repeat_interval > 0):
        out.append(Violation(
            "repeatInterval",
            "required",
            "Repeat interval is required when repeat is enabled",
        ))
    return out


def _check_task(data: Mapping[str, Any]):
    try:
        task = TaskCreate.model_validate(dict(data))
    except PydanticValidationError as exc:
        return None, _violations(exc)
    return task, _task_rules(task)


def validate_task(data: Mapping[str, Any]) -> List[Violation]:
    """Return every constraint the given task fields break (empty if valid)."""
    return _check_task(data)[1]


def clean_task(data: Mapping[str, Any]) -> TaskCreate:
    """Validate task fields, raising ValidationError with all violations."""
    task, violations = _check_task(data)
    if violations:
        raise ValidationError(violations)
    return task


def validate_group(data: Mapping[str, Any]) -> List[Violation]:
    try:
        TaskGroupCreate.model_validate(dict(data))
    except PydanticValidationError as exc:
        return _violations(exc)
    return []


def clean_group(data: Mapping[str, Any]) -> TaskGroupCreate:
    try:
        return TaskGroupCreate.model_validate(dict(data))
    except PydanticValidationError as exc:
        raise ValidationError(_violations(exc)) from None


def due_flags(
    due_date: Optional[datetime],
    completed: bool,
    today: Optional[date] = None,
) -> Dict[str, bool]:
    """Compute isOverdue / isDueToday / isDueTomorrow by calendar date.

    Args:
        due_date: The task's due date, if any
        completed: Whether the task is completed (only affects isOverdue)
        today: Reference day; defaults to the current local date

    Returns:
        Dict with is_overdue, is_due_today and is_due_tomorrow
    """
    if due_date is None:
        return {"is_overdue": False, "is_due_today": False, "is_due_tomorrow": False}
    today = today or date.today()
    due_day = due_date.date()
    return {
        "is_overdue": not completed and due_day < today,
        "is_due_today": due_day == today,
        "is_due_tomorrow": due_day == today + timedelta(days=1),
    }
