from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from models.team import DEFAULT_MAX_PLAYERS


class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=80)
    max_players: int = Field(DEFAULT_MAX_PLAYERS, ge=1, le=20)


class TeamGenerate(BaseModel):
    count: int = Field(..., ge=1, le=200)
    prefix: str = Field("Team", min_length=1, max_length=40)
    max_players: int = Field(DEFAULT_MAX_PLAYERS, ge=1, le=20)


class TeamUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=80)
    max_players: Optional[int] = Field(None, ge=1, le=20)


class ScoreAdjustment(BaseModel):
    adjustment: int


class DisqualifyRequest(BaseModel):
    is_disqualified: bool = True


class TeamResponse(BaseModel):
    id: str
    event_id: str
    name: str
    score: int
    current_step: int
    is_disqualified: bool
    max_players: int
    hunt_finished_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AvailableTeam(BaseModel):
    id: str
    name: str
    current_members: int
    max_players: int
