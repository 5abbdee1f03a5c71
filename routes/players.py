from fastapi import APIRouter, Depends, HTTPException, Header
from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional, Dict
import logging
import jwt

from database.connection import get_db
from models.event import Event
from models.player import Player
from models.qr_code import FakeQRScan
from models.scan import Scan
from models.team import Team
from models.team_clue_order import TeamClueOrder
from routes.admin import get_current_admin
from schemas.player import PlayerRegister, PlayerLogin, PlayerResponse, PlayerMove, PasswordReset
from schemas.team import AvailableTeam
from services import hunt_clock
from services.errors import RegistrationClosed
from utils.auth import create_player_token, verify_player_token, bearer_token

router = APIRouter()
logger = logging.getLogger(__name__)


def get_current_player(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db)
) -> Dict[str, str]:
    """
    Dependency to verify a player JWT token
    Returns the player_id and team_id the token was issued for, as long as
    the player still exists and still belongs to that team
    """
    token = bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Authorization header missing")

    try:
        payload = verify_player_token(token)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired - Please login again")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")

    if not payload:
        raise HTTPException(status_code=401, detail="Invalid token type")

    player = db.query(Player).filter(Player.id == payload["player_id"]).first()
    if not player:
        raise HTTPException(status_code=401, detail="Player no longer exists")
    if player.team_id != payload["team_id"]:
        raise HTTPException(status_code=401, detail="Team changed - Please login again")
    return payload


@router.get("/teams/available", response_model=list[AvailableTeam])
def available_teams(db: Session = Depends(get_db)):
    """Teams of the active event that still have room for players"""
    event = db.query(Event).filter(Event.is_active == True).first()
    if not event:
        return []

    teams = db.query(Team).filter(
        Team.event_id == event.id,
        Team.is_disqualified == False
    ).order_by(Team.name).all()

    available = []
    for team in teams:
        members = db.query(Player).filter(Player.team_id == team.id).count()
        if members < team.max_players:
            available.append(AvailableTeam(
                id=team.id, name=team.name, current_members=members, max_players=team.max_players
            ))
    return available


@router.post("/auth/register", response_model=PlayerResponse)
def register_player(request: PlayerRegister, db: Session = Depends(get_db)):
    existing = db.query(Player).filter(Player.username == request.username).first()
    if existing:
        raise HTTPException(status_code=400, detail="Username already taken. Please choose another.")

    team = db.query(Team).filter(Team.id == request.team_id).first()
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")

    event = db.query(Event).filter(Event.id == team.event_id).first()
    if not event or not event.is_active:
        raise RegistrationClosed()
    if not hunt_clock.within_registration_window(event, datetime.utcnow()):
        raise RegistrationClosed("Registration window is closed for this event")

    members = db.query(Player).filter(Player.team_id == team.id).count()
    if members >= team.max_players:
        raise HTTPException(status_code=400, detail="This team is already full")

    player = Player(
        team_id=team.id,
        name=request.name.strip(),
        username=request.username,
        password_hash=Player.hash_password(request.password)
    )
    db.add(player)
    db.commit()
    db.refresh(player)
    logger.info("Player %s joined team %s", player.username, team.name)
    return player


@router.post("/auth/login")
def login_player(credentials: PlayerLogin, db: Session = Depends(get_db)):
    player = db.query(Player).filter(Player.username == credentials.username.lower()).first()
    if not player or not player.verify_password(credentials.password):
        raise HTTPException(status_code=401, detail="Invalid username or password")

    team = db.query(Team).filter(Team.id == player.team_id).first()
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")
    if team.is_disqualified:
        raise HTTPException(status_code=403, detail="Your team has been disqualified")

    event = db.query(Event).filter(Event.id == team.event_id).first()
    if not event or not event.is_active:
        raise HTTPException(status_code=403, detail="This event is not currently active")

    return {
        "success": True,
        "token": create_player_token(player.id, team.id),
        "player_id": player.id,
        "team_id": team.id,
        "team_name": team.name,
        "event_name": event.name
    }


@router.get("/admin/players", response_model=list[PlayerResponse])
def list_players(
    team_id: Optional[str] = None,
    event_id: Optional[str] = None,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin)
):
    """List players of one team, or of every team in an event"""
    query = db.query(Player)
    if team_id:
        query = query.filter(Player.team_id == team_id)
    elif event_id:
        query = query.join(Team, Team.id == Player.team_id).filter(Team.event_id == event_id)
    else:
        raise HTTPException(status_code=400, detail="team_id or event_id is required")

    return query.order_by(Player.created_at.asc()).all()


def get_player_or_404(db: Session, player_id: str) -> Player:
    player = db.query(Player).filter(Player.id == player_id).first()
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")
    return player


@router.delete("/admin/players/{player_id}")
def delete_player(player_id: str, db: Session = Depends(get_db), admin: str = Depends(get_current_admin)):
    player = get_player_or_404(db, player_id)
    username = player.username

    # Keep the team's scan and hint history, only forget who did it
    db.query(Scan).filter(Scan.player_id == player.id).update(
        {Scan.player_id: None}, synchronize_session=False
    )
    db.query(FakeQRScan).filter(FakeQRScan.player_id == player.id).update(
        {FakeQRScan.player_id: None}, synchronize_session=False
    )
    db.query(TeamClueOrder).filter(TeamClueOrder.hint_viewed_by == player.id).update(
        {TeamClueOrder.hint_viewed_by: None}, synchronize_session=False
    )
    db.delete(player)
    db.commit()
    logger.info("Deleted player %s", username)
    return {"success": True, "message": f"Player @{username} deleted"}


@router.put("/admin/players/{player_id}/move", response_model=PlayerResponse)
def move_player(
    player_id: str,
    request: PlayerMove,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin)
):
    player = get_player_or_404(db, player_id)
    if player.team_id == request.new_team_id:
        return player

    target = db.query(Team).filter(Team.id == request.new_team_id).first()
    if not target:
        raise HTTPException(status_code=404, detail="Target team not found")

    current = db.query(Team).filter(Team.id == player.team_id).first()
    if current and current.event_id != target.event_id:
        raise HTTPException(status_code=400, detail="Target team belongs to another event")

    members = db.query(Player).filter(Player.team_id == target.id).count()
    if members >= target.max_players:
        raise HTTPException(status_code=400, detail="Target team is full")

    player.team_id = target.id
    db.commit()
    db.refresh(player)
    logger.info("Moved player %s to team %s", player.username, target.name)
    return player


@router.post("/admin/players/{player_id}/reset-password")
def reset_password(
    player_id: str,
    request: PasswordReset,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin)
):
    player = get_player_or_404(db, player_id)
    player.password_hash = Player.hash_password(request.new_password)
    db.commit()
    logger.info("Password reset for player %s", player.username)
    return {"success": True, "message": f"Password reset for {player.name} (@{player.username})"}
