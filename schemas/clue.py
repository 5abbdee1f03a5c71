from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class ClueBase(BaseModel):
    step_number: int = Field(..., ge=0)
    text: str = Field(..., min_length=1)
    location_hint: Optional[str] = None
    timed_hint_text: Optional[str] = None


class ClueCreate(ClueBase):
    answer_notes: Optional[str] = None


class ClueUpdate(BaseModel):
    step_number: Optional[int] = Field(None, ge=0)
    text: Optional[str] = Field(None, min_length=1)
    location_hint: Optional[str] = None
    timed_hint_text: Optional[str] = None
    answer_notes: Optional[str] = None


class ClueResponse(ClueBase):
    id: str
    event_id: str

    class Config:
        from_attributes = True


class ClueAdminResponse(ClueResponse):
    answer_notes: Optional[str] = None
    created_at: datetime
