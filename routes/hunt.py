from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from datetime import datetime
from typing import Dict

from database.connection import get_db
from models.clue import Clue
from models.event import Event
from models.team import Team
from models.team_clue_order import TeamClueOrder
from routes.players import get_current_player
from schemas.hunt import (
    ScanRequest, ScanResponse, StartClueRequest, ClueOrderResponse, HintRequest, HintResponse,
    CurrentClueResponse, ProgressResponse, FeedItem,
)
from services import hint_gate, hunt_clock, notifications, scan_validator
from services.errors import TeamNotFound, EventNotFound
from services.scan_validator import DecoyResult, TeamState

router = APIRouter()


def load_team_and_event(db: Session, team_id: str):
    team = db.query(Team).filter(Team.id == team_id).first()
    if not team:
        raise TeamNotFound()
    event = db.query(Event).filter(Event.id == team.event_id).first()
    if not event:
        raise EventNotFound()
    return team, event


@router.post("/hunt/scan", response_model=ScanResponse)
def scan(
    request: ScanRequest,
    db: Session = Depends(get_db),
    player: Dict[str, str] = Depends(get_current_player)
):
    result = scan_validator.submit_scan(db, request.token, player["team_id"], player_id=player["player_id"])

    if isinstance(result, DecoyResult):
        return ScanResponse(
            success=False,
            outcome=result.outcome,
            message="Gotcha! You fell for a fake QR!",
            redirect_url=result.redirect_url,
            label=result.label
        )

    if result.is_complete:
        message = "Congratulations! You've completed the hunt!"
    else:
        message = f"Correct! +{result.points_earned} points{' (hint used)' if result.hint_used else ''}. Move on to the next clue."

    return ScanResponse(
        success=True,
        outcome=result.outcome,
        message=message,
        points_earned=result.points_earned,
        new_score=result.new_score,
        new_step=result.new_step,
        is_complete=result.is_complete,
        hint_used=result.hint_used
    )


@router.get("/hunt/current", response_model=CurrentClueResponse)
def current_clue(db: Session = Depends(get_db), player: Dict[str, str] = Depends(get_current_player)):
    """The clue the team must find next, without starting its hint timer"""
    now = datetime.utcnow()
    team, event = load_team_and_event(db, player["team_id"])
    total = scan_validator.total_clues(db, event.id)
    state = scan_validator.team_state(team, event, total, now)

    response = CurrentClueResponse(
        state=state.value,
        step=team.current_step,
        total_clues=total,
        hunt_seconds_remaining=int(hunt_clock.hunt_time_remaining(event, now).total_seconds())
    )
    if state != TeamState.IN_PROGRESS:
        return response

    clue_order = db.query(TeamClueOrder).filter(
        TeamClueOrder.team_id == team.id,
        TeamClueOrder.step_index == team.current_step
    ).first()
    if not clue_order:
        return response
    clue = db.query(Clue).filter(Clue.id == clue_order.clue_id).first()

    response.clue_order_id = clue_order.id
    response.clue_id = clue.id
    response.text = clue.text
    response.location_hint = clue.location_hint
    response.has_hint = bool(clue.timed_hint_text)
    response.hint_viewed = clue_order.hint_viewed
    response.hint_seconds_remaining = hint_gate.hint_seconds_remaining(clue_order, event, now)
    if clue_order.hint_viewed:
        response.hint_text = clue.timed_hint_text
    return response


@router.post("/hunt/start-clue", response_model=ClueOrderResponse)
def start_clue(
    request: StartClueRequest,
    db: Session = Depends(get_db),
    player: Dict[str, str] = Depends(get_current_player)
):
    return hint_gate.mark_clue_started(db, player["team_id"], request.clue_order_id)


@router.post("/hunt/hint", response_model=HintResponse)
def view_hint(
    request: HintRequest,
    db: Session = Depends(get_db),
    player: Dict[str, str] = Depends(get_current_player)
):
    result = hint_gate.view_hint(db, player["team_id"], request.clue_id, player_id=player["player_id"])
    if result.already_viewed:
        message = "Hint already viewed"
    else:
        message = f"Hint viewed! Points for this clue reduced to +{scan_validator.POINTS_WITH_HINT}"
    return HintResponse(message=message, hint_text=result.hint_text, already_viewed=result.already_viewed)


@router.get("/hunt/progress", response_model=ProgressResponse)
def progress(db: Session = Depends(get_db), player: Dict[str, str] = Depends(get_current_player)):
    team, event = load_team_and_event(db, player["team_id"])
    total = scan_validator.total_clues(db, event.id)
    state = scan_validator.team_state(team, event, total, datetime.utcnow())

    return ProgressResponse(
        team_id=team.id,
        team_name=team.name,
        state=state.value,
        score=team.score,
        current_step=team.current_step,
        total_clues=total,
        is_complete=state == TeamState.COMPLETED,
        hunt_finished_at=team.hunt_finished_at
    )


@router.get("/hunt/feed", response_model=list[FeedItem])
def feed(after: int = 0, db: Session = Depends(get_db), player: Dict[str, str] = Depends(get_current_player)):
    """Recent hunt notifications for the player's event, for polling clients"""
    if after < 0:
        raise HTTPException(status_code=400, detail="after must be >= 0")
    team, event = load_team_and_event(db, player["team_id"])

    return [
        FeedItem(
            sequence=e.sequence,
            kind=e.kind,
            team_id=e.team_id,
            payload=e.payload,
            occurred_at=e.occurred_at
        )
        for e in notifications.bus.recent(event.id, after=after)
    ]
