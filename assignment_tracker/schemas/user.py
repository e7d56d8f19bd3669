"""User Schemas — the User payload returned by engine operations."""

from datetime import datetime

from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    """User as stored, after an engine transition."""
    id: str
    name: str
    email: str
    pending_tasks: list[str] = Field(default_factory=list)
    date_created: datetime
