"""DayLog and ProductivityBlock data models."""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

# bool first so True/False are never coerced to 1/0; NaN and infinity
# have no JSON form
HabitValue = Union[bool, int, Annotated[float, Field(allow_inf_nan=False)], str]

DATE_KEY_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class ProductivityBlock(BaseModel):
    """A block of focused time within a day."""

    id: str = Field(..., description="Block identifier")
    time_range: str = Field(..., description="Time range (e.g., '09:00 - 11:00')")
    activity: str = Field(..., description="What was worked on")
    intensity: Literal["low", "medium", "high"] = Field(..., description="Intensity")

    model_config = {"frozen": True, "populate_by_name": True, "alias_generator": to_camel}


class DayLog(BaseModel):
    """Represents the journal record of one calendar day.

    ``habits_completed`` is the legacy completion record and
    ``habit_values`` the generalized one. For boolean habits the two
    are written together: ``habit_values[id] is True`` exactly when
    ``id`` is in ``habits_completed``.
    """

    date: str = Field(..., pattern=DATE_KEY_PATTERN, description="ISO date (YYYY-MM-DD)")
    habits_completed: list[str] = Field(
        default_factory=list, description="IDs of completed habits"
    )
    habit_values: Optional[dict[str, HabitValue]] = Field(
        default=None, description="Habit id -> recorded value"
    )
    productivity: list[ProductivityBlock] = Field(
        default_factory=list, description="Productivity blocks"
    )
    highlight: str = Field(default="", description="Best part of the day")
    reflection: str = Field(default="", description="Free-text reflection")

    model_config = {"frozen": True, "populate_by_name": True, "alias_generator": to_camel}

    @classmethod
    def empty(cls, date_key: str) -> "DayLog":
        """Build the all-empty log for a date."""
        return cls(date=date_key)

    def value_for(self, habit_id: str) -> Optional[HabitValue]:
        """Get the recorded value of a habit.

        Falls back to the legacy completion list when no value is recorded.

        Args:
            habit_id: Habit identifier.

        Returns:
            The recorded value, True for a legacy completion, None otherwise.
        """
        if self.habit_values and habit_id in self.habit_values:
            return self.habit_values[habit_id]
        if habit_id in self.habits_completed:
            return True
        return None

    def is_empty(self) -> bool:
        """Check whether nothing has been logged for the day."""
        return not (
            self.habits_completed
            or self.habit_values
            or self.productivity
            or self.highlight
            or self.reflection
        )
