from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class JobPosition(BaseModel):
    """Job position stored by the hosted backend."""

    id: str
    title: str = ""
    description: str = ""
    requirements: list[str] = Field(default_factory=list)
    status: str = "active"

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)
