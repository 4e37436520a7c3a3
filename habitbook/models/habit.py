"""HabitDefinition data model."""

import uuid
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

HabitType = Literal["boolean", "number", "text"]

HABIT_TYPES: tuple[str, ...] = ("boolean", "number", "text")


def new_id() -> str:
    """Generate a fresh opaque record id."""
    return str(uuid.uuid4())


class HabitDefinition(BaseModel):
    """Represents a user-defined tracked behaviour.

    Records written before habits carried a value type have no ``type``;
    they are read as boolean (checkbox) habits.
    """

    id: str = Field(..., min_length=1, description="Stable habit identifier")
    name: str = Field(..., description="Display name")
    category: Optional[str] = Field(default=None, description="Category (e.g., 'Health')")
    color: Optional[str] = Field(default=None, description="Display colour")
    type: HabitType = Field(default="boolean", description="Value type")
    target: Optional[str] = Field(default=None, description="Target (e.g., '10 pages')")

    model_config = {"frozen": True, "populate_by_name": True, "alias_generator": to_camel}


# Starter set shown to a new or empty journal
SEED_HABITS: tuple[dict, ...] = (
    {"name": "Work out", "category": "Health", "color": "red"},
    {"name": "LeetCode", "category": "Career", "color": "blue"},
    {"name": "Read Book", "category": "Growth", "color": "green"},
)


def seed_habits() -> list[HabitDefinition]:
    """Build the starter habits with freshly generated ids."""
    return [HabitDefinition(id=new_id(), type="boolean", **seed) for seed in SEED_HABITS]
