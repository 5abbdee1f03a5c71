from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging

from database.connection import get_db
from models.event import Event
from models.player import Player
from models.qr_code import FakeQRScan
from models.team import Team
from routes.admin import get_current_admin, get_event_or_404
from schemas.team import TeamCreate, TeamGenerate, TeamUpdate, TeamResponse, ScoreAdjustment, DisqualifyRequest
from services.clue_order import event_teams
from utils.tokens import team_name

router = APIRouter()
logger = logging.getLogger(__name__)


def get_team_or_404(db: Session, team_id: str) -> Team:
    team = db.query(Team).filter(Team.id == team_id).first()
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")
    return team


@router.get("/admin/events/{event_id}/teams", response_model=list[TeamResponse])
def list_teams(event_id: str, db: Session = Depends(get_db), admin: str = Depends(get_current_admin)):
    get_event_or_404(db, event_id)
    return event_teams(db, event_id)


@router.post("/admin/events/{event_id}/teams", response_model=TeamResponse)
def create_team(
    event_id: str,
    team: TeamCreate,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin)
):
    event = get_event_or_404(db, event_id)
    if event.hunt_started_at is not None:
        raise HTTPException(409, "Stop the hunt before adding teams")

    db_team = Team(event_id=event_id, name=team.name, max_players=team.max_players)
    db.add(db_team)
    db.commit()
    db.refresh(db_team)
    return db_team


@router.post("/admin/events/{event_id}/teams/generate", response_model=list[TeamResponse])
def generate_teams(
    event_id: str,
    request: TeamGenerate,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin)
):
    """Create count numbered teams, continuing after the event's existing teams"""
    event = get_event_or_404(db, event_id)
    if event.hunt_started_at is not None:
        raise HTTPException(409, "Stop the hunt before adding teams")

    existing = db.query(Team).filter(Team.event_id == event_id).count()

    teams = []
    for number in range(existing + 1, existing + request.count + 1):
        team = Team(event_id=event_id, name=team_name(request.prefix, number), max_players=request.max_players)
        db.add(team)
        # Flush one at a time so creation order follows the numbering
        db.flush()
        teams.append(team)

    db.commit()
    for team in teams:
        db.refresh(team)
    logger.info("Generated %d teams for event %s", len(teams), event_id)
    return teams


@router.patch("/admin/teams/{team_id}", response_model=TeamResponse)
def update_team(
    team_id: str,
    updates: TeamUpdate,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin)
):
    team = get_team_or_404(db, team_id)
    changes = updates.model_dump(exclude_unset=True, exclude_none=True)

    if "max_players" in changes:
        members = db.query(Player).filter(Player.team_id == team.id).count()
        if changes["max_players"] < members:
            raise HTTPException(400, f"Team already has {members} players")

    for field, value in changes.items():
        setattr(team, field, value)

    db.commit()
    db.refresh(team)
    return team


@router.delete("/admin/teams/{team_id}")
def delete_team(team_id: str, db: Session = Depends(get_db), admin: str = Depends(get_current_admin)):
    """Delete a team with its players, clue order, scans and decoy scans"""
    team = get_team_or_404(db, team_id)
    event = db.query(Event).filter(Event.id == team.event_id).first()
    if event and event.hunt_started_at is not None:
        raise HTTPException(409, "Stop the hunt before deleting teams")

    name = team.name
    db.query(FakeQRScan).filter(FakeQRScan.team_id == team.id).delete(synchronize_session=False)
    db.delete(team)
    db.commit()
    logger.info("Deleted team %s", name)
    return {"success": True, "message": f"Team {name} deleted"}


@router.patch("/admin/teams/{team_id}/disqualify", response_model=TeamResponse)
def set_disqualified(
    team_id: str,
    request: DisqualifyRequest,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin)
):
    team = get_team_or_404(db, team_id)
    team.is_disqualified = request.is_disqualified
    db.commit()
    db.refresh(team)
    logger.info("Team %s disqualified=%s", team.name, team.is_disqualified)
    return team


@router.post("/admin/teams/{team_id}/score", response_model=TeamResponse)
def adjust_score(
    team_id: str,
    request: ScoreAdjustment,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin)
):
    """
    Manual score override by the organizer
    Adjustments come in multiples of 5 and the score never drops below 0
    """
    if request.adjustment % 5 != 0:
        raise HTTPException(400, "Adjustment must be a multiple of 5")

    team = get_team_or_404(db, team_id)
    team.score = max(0, team.score + request.adjustment)
    db.commit()
    db.refresh(team)
    logger.info("Team %s score adjusted by %d", team.name, request.adjustment)
    return team
