from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from models.event import DEFAULT_HUNT_DURATION_MINUTES, DEFAULT_HINT_DELAY_MINUTES


class EventBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    registration_start: Optional[datetime] = None
    registration_end: Optional[datetime] = None
    hunt_duration_minutes: int = Field(DEFAULT_HUNT_DURATION_MINUTES, ge=1, le=24 * 60)
    hint_delay_minutes: int = Field(DEFAULT_HINT_DELAY_MINUTES, ge=0, le=24 * 60)


class EventCreate(EventBase):
    pass


class EventUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    registration_start: Optional[datetime] = None
    registration_end: Optional[datetime] = None
    hunt_duration_minutes: Optional[int] = Field(None, ge=1, le=24 * 60)
    hint_delay_minutes: Optional[int] = Field(None, ge=0, le=24 * 60)


class EventResponse(EventBase):
    id: str
    is_active: bool
    hunt_started_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class HuntStartResponse(BaseModel):
    success: bool = True
    message: str
    teams_ready: int
    clues_per_team: int
