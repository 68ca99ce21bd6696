from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

HEX_COLOR_PATTERN = r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$"


class CamelModel(BaseModel):
    """Base for boundary schemas: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class TaskGroupCreate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=100)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    description: Optional[str] = Field(None, max_length=500)


class TaskGroupUpdate(CamelModel):
    name: Optional[str] = None
    color: Optional[str] = None
    description: Optional[str] = None


class TaskGroupRef(CamelModel):
    """Group as inlined into a task record."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    color: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TaskGroupRead(TaskGroupRef):
    task_count: int = 0
