from pydantic import BaseModel
from datetime import datetime
from typing import Optional, Literal, Dict, Any


class ScanRequest(BaseModel):
    token: str


class StartClueRequest(BaseModel):
    clue_order_id: str


class HintRequest(BaseModel):
    clue_id: str


class ScanResponse(BaseModel):
    success: bool
    outcome: Literal["advanced", "decoy"]
    message: str
    points_earned: int = 0
    new_score: Optional[int] = None
    new_step: Optional[int] = None
    is_complete: bool = False
    hint_used: bool = False
    redirect_url: Optional[str] = None
    label: Optional[str] = None


class ClueOrderResponse(BaseModel):
    id: str
    team_id: str
    clue_id: str
    step_index: int
    clue_started_at: Optional[datetime] = None
    hint_viewed: bool
    hint_viewed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class HintResponse(BaseModel):
    success: bool = True
    message: str
    hint_text: Optional[str] = None
    already_viewed: bool = False


class CurrentClueResponse(BaseModel):
    state: str
    step: int
    total_clues: int
    hunt_seconds_remaining: int
    clue_order_id: Optional[str] = None
    clue_id: Optional[str] = None
    text: Optional[str] = None
    location_hint: Optional[str] = None
    has_hint: bool = False
    hint_viewed: bool = False
    hint_text: Optional[str] = None
    hint_seconds_remaining: Optional[int] = None


class ProgressResponse(BaseModel):
    team_id: str
    team_name: str
    state: str
    score: int
    current_step: int
    total_clues: int
    is_complete: bool
    hunt_finished_at: Optional[datetime] = None


class FeedItem(BaseModel):
    sequence: int
    kind: str
    team_id: Optional[str] = None
    payload: Dict[str, Any]
    occurred_at: datetime
