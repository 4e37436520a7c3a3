"""JournalData aggregate and paper colour palette."""

from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from habitbook.models.day_log import DayLog
from habitbook.models.goal import Goal
from habitbook.models.habit import HabitDefinition, seed_habits

PaperColor = Literal["#fefce8", "#ffffff", "#eff6ff", "#fdf2f8", "#f0fdf4"]

PAPER_COLORS: dict[str, str] = {
    "Yellow": "#fefce8",
    "White": "#ffffff",
    "Blue": "#eff6ff",
    "Pink": "#fdf2f8",
    "Green": "#f0fdf4",
}

DEFAULT_PAPER_COLOR = "#fefce8"


def resolve_paper_color(color: str) -> str:
    """Resolve a palette name or hex value to a palette value.

    Args:
        color: Palette name (case-insensitive) or hex value.

    Returns:
        The palette hex value.

    Raises:
        ValueError: If the colour is not in the palette.
    """
    value = color.strip().lower()
    for name, hex_value in PAPER_COLORS.items():
        if value in (name.lower(), hex_value):
            return hex_value
    choices = ", ".join(PAPER_COLORS)
    raise ValueError(f"Unknown paper colour '{color}'. Choose one of: {choices}")


def paper_color_name(value: Optional[str]) -> str:
    """Get the palette name for a hex value (default colour when unset)."""
    value = value or DEFAULT_PAPER_COLOR
    for name, hex_value in PAPER_COLORS.items():
        if hex_value == value:
            return name
    return value


class JournalData(BaseModel):
    """The whole journal: habits, day logs, goals and theme."""

    habits: list[HabitDefinition] = Field(
        default_factory=list, description="Habits in display order"
    )
    days: dict[str, DayLog] = Field(default_factory=dict, description="Date key -> day log")
    monthly_goals: list[Goal] = Field(default_factory=list, description="All goals")
    theme_color: Optional[PaperColor] = Field(default=None, description="Paper colour")

    model_config = {"frozen": True, "populate_by_name": True, "alias_generator": to_camel}

    def day(self, date_key: str) -> DayLog:
        """Get the log for a date, or the empty default if none is stored."""
        return self.days.get(date_key) or DayLog.empty(date_key)

    def get_habit(self, habit_id: str) -> Optional[HabitDefinition]:
        for habit in self.habits:
            if habit.id == habit_id:
                return habit
        return None

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        for goal in self.monthly_goals:
            if goal.id == goal_id:
                return goal
        return None

    def goals_for_month(self, month_key: str) -> list[Goal]:
        """Get the goals visible under a displayed month."""
        return [g for g in self.monthly_goals if g.is_visible_in(month_key)]

    def to_json(self) -> str:
        """Serialize using the camelCase storage field names."""
        return self.model_dump_json(by_alias=True, exclude_none=True)

    @classmethod
    def from_json(cls, raw: str) -> "JournalData":
        """Parse a serialized journal.

        Raises:
            pydantic.ValidationError: If the content is malformed.
        """
        return cls.model_validate_json(raw)


def default_journal() -> JournalData:
    """Build the journal a new user starts with."""
    return JournalData(habits=seed_habits())
