from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class FakeQRCreate(BaseModel):
    label: str = Field(..., min_length=1, max_length=80)
    redirect_url: str = Field(..., min_length=1)


class QRCodeResponse(BaseModel):
    id: str
    event_id: str
    clue_id: Optional[str] = None
    token: str
    is_fake: bool
    redirect_url: Optional[str] = None
    label: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ClueQRCode(BaseModel):
    clue_id: str
    step_number: int
    token: str
    scan_url: str
