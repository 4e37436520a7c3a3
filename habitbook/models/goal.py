"""Goal data model."""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

MONTH_KEY_PATTERN = r"^\d{4}-\d{2}$"


class Goal(BaseModel):
    """Represents a month-scoped goal."""

    id: str = Field(..., min_length=1, description="Goal identifier")
    title: str = Field(..., description="Goal title")
    description: str = Field(default="", description="Optional description")
    month: Optional[str] = Field(
        default=None, pattern=MONTH_KEY_PATTERN, description="Owning month (YYYY-MM)"
    )
    completed: bool = Field(default=False, description="Whether the goal is done")

    model_config = {"frozen": True, "populate_by_name": True, "alias_generator": to_camel}

    def is_visible_in(self, month_key: str) -> bool:
        """Check whether the goal shows up under a displayed month.

        Goals saved before goals carried a month have none and show up
        under every month.
        """
        return self.month is None or self.month == month_key
