"""Data models for habitbook."""

from habitbook.models.day_log import DayLog, HabitValue, ProductivityBlock
from habitbook.models.goal import Goal
from habitbook.models.habit import (
    HABIT_TYPES,
    HabitDefinition,
    HabitType,
    new_id,
    seed_habits,
)
from habitbook.models.journal import (
    DEFAULT_PAPER_COLOR,
    PAPER_COLORS,
    JournalData,
    PaperColor,
    default_journal,
    paper_color_name,
    resolve_paper_color,
)

__all__ = [
    "DayLog",
    "HabitValue",
    "ProductivityBlock",
    "Goal",
    "HABIT_TYPES",
    "HabitDefinition",
    "HabitType",
    "new_id",
    "seed_habits",
    "DEFAULT_PAPER_COLOR",
    "PAPER_COLORS",
    "JournalData",
    "PaperColor",
    "default_journal",
    "paper_color_name",
    "resolve_paper_color",
]
