"""Configuration classes for the critical path engine."""

from pydantic import BaseModel, Field


class EngineConfig(BaseModel):
    """Configuration for duration resolution."""

    # Duration used when a task lacks a start or due date, or due < start
    default_duration_days: int = Field(default=1, ge=1)
