"""Translation between remote table rows and journal records.

Remote tables:

    habits(id, user_id, name, category, color, type, target)
    day_logs(user_id, date, habits_completed, habit_values, highlight,
             reflection, productivity, updated_at)  unique (user_id, date)
    monthly_goals(id, user_id, title, completed, month, description)

Unknown columns in fetched rows are ignored. Unknown fields in updates
raise ValueError.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from habitbook.models import DayLog, Goal, HabitDefinition, ProductivityBlock

HABIT_FIELDS = ("name", "category", "color", "type", "target")

# DayLog field -> day_logs column
DAY_LOG_COLUMNS = {
    "habits_completed": "habits_completed",
    "habit_values": "habit_values",
    "highlight": "highlight",
    "reflection": "reflection",
    "productivity": "productivity",
}

GOAL_FIELDS = ("title", "description", "completed", "month")


def _check_fields(updates: dict[str, Any], allowed, entity: str) -> None:
    unknown = set(updates) - set(allowed)
    if unknown:
        raise ValueError(f"Unknown {entity} fields: {', '.join(sorted(unknown))}")


# ==================== Habits ====================


def habit_from_row(row: dict[str, Any]) -> HabitDefinition:
    """Build a habit from a ``habits`` row.

    Raises:
        KeyError: If the row has no id.
        pydantic.ValidationError: If a column holds an invalid value.
    """
    return HabitDefinition(
        id=str(row["id"]),
        name=row.get("name") or "",
        category=row.get("category"),
        color=row.get("color"),
        type=row.get("type") or "boolean",
        target=row.get("target"),
    )


def habit_to_row(habit: HabitDefinition, user_id: str) -> dict[str, Any]:
    return {
        "id": habit.id,
        "user_id": user_id,
        "name": habit.name,
        "category": habit.category,
        "color": habit.color,
        "type": habit.type,
        "target": habit.target,
    }


def habit_updates_to_row(updates: dict[str, Any]) -> dict[str, Any]:
    _check_fields(updates, HABIT_FIELDS, "habit")
    return {field: updates[field] for field in HABIT_FIELDS if field in updates}


# ==================== Day logs ====================


def day_log_from_row(row: dict[str, Any]) -> DayLog:
    """Build a day log from a ``day_logs`` row.

    The remote productivity column does not hold productivity blocks,
    so fetched logs always start with none.
    """
    return DayLog(
        date=row["date"],
        habits_completed=row.get("habits_completed") or [],
        habit_values=row.get("habit_values") or {},
        highlight=row.get("highlight") or "",
        reflection=row.get("reflection") or "",
        productivity=[],
    )


def _column_value(field: str, value: Any) -> Any:
    if field == "productivity":
        return [
            block.model_dump(by_alias=True) if isinstance(block, ProductivityBlock) else block
            for block in value or []
        ]
    if field == "habits_completed":
        return list(value or [])
    if field == "habit_values":
        return dict(value or {})
    return value


def day_log_to_row(
    date_key: str,
    updates: dict[str, Any],
    user_id: str,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Build the upsert payload for a partial day log update.

    Only fields present in ``updates`` are included, so the upsert leaves
    other columns untouched.
    """
    _check_fields(updates, DAY_LOG_COLUMNS, "day log")
    payload: dict[str, Any] = {
        "user_id": user_id,
        "date": date_key,
        "updated_at": (now or datetime.now(timezone.utc)).isoformat(),
    }
    for field, column in DAY_LOG_COLUMNS.items():
        if field in updates:
            payload[column] = _column_value(field, updates[field])
    return payload


# ==================== Goals ====================


def goal_from_row(row: dict[str, Any]) -> Goal:
    return Goal(
        id=str(row["id"]),
        title=row.get("title") or "",
        description=row.get("description") or "",
        month=row.get("month") or None,
        completed=bool(row.get("completed")),
    )


def goal_to_row(goal: Goal, user_id: str) -> dict[str, Any]:
    return {
        "id": goal.id,
        "user_id": user_id,
        "title": goal.title,
        "description": goal.description,
        "completed": goal.completed,
        "month": goal.month,
    }


def goal_updates_to_row(updates: dict[str, Any]) -> dict[str, Any]:
    _check_fields(updates, GOAL_FIELDS, "goal")
    return {field: updates[field] for field in GOAL_FIELDS if field in updates}
