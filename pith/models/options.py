"""Project option models.

Every option a Project recognizes is a field here; anything else is
rejected when the model is validated.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Project attributes that may be set after construction (options minus `ignore`).
PROJECT_ATTRIBUTES: tuple[str, ...] = (
    "assume_content_negotiation",
    "assume_directory_index",
)


class ProjectOptions(BaseModel):
    """Construction-time options for a Project.

    ``ignore`` adds to the default ignore patterns; it never replaces them.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    ignore: list[str] = Field(default_factory=list)
    assume_content_negotiation: bool = False
    assume_directory_index: bool = False
