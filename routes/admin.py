from fastapi import APIRouter, Depends, HTTPException, Header
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import Optional
import logging
import os
import jwt

from database.connection import get_db
from models.event import Event
from models.qr_code import FakeQRScan
from models.scan import Scan
from models.team_clue_order import TeamClueOrder
from schemas.event import EventCreate, EventUpdate, EventResponse, HuntStartResponse
from services import clue_order
from utils.auth import create_admin_token, verify_admin_token, bearer_token

router = APIRouter()
logger = logging.getLogger(__name__)

# Organizer credentials from environment variables
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "hunt2024")


class AdminLogin(BaseModel):
    username: str
    password: str


def get_current_admin(authorization: Optional[str] = Header(None)) -> str:
    """
    Dependency to verify the organizer JWT token
    Validates token signature and expiration
    """
    token = bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Authorization header missing")

    try:
        if not verify_admin_token(token):
            raise HTTPException(status_code=403, detail="Invalid admin token - Access denied")
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired - Please login again")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")

    return token


def get_event_or_404(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.post("/admin/login")
def admin_login(credentials: AdminLogin):
    """
    Organizer login endpoint
    Returns a signed JWT token that expires after JWT_EXPIRATION_HOURS
    """
    if credentials.username != ADMIN_USERNAME or credentials.password != ADMIN_PASSWORD:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return {
        "success": True,
        "token": create_admin_token(),
        "role": "admin",
        "message": "Login successful"
    }


@router.post("/admin/events", response_model=EventResponse)
def create_event(
    event: EventCreate,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin)
):
    """New events start inactive, activate one explicitly before registration opens"""
    if event.registration_start and event.registration_end and event.registration_start >= event.registration_end:
        raise HTTPException(400, "Registration start must be before registration end")

    db_event = Event(**event.model_dump(), is_active=False)
    db.add(db_event)
    db.commit()
    db.refresh(db_event)
    return db_event


@router.get("/admin/events", response_model=list[EventResponse])
def list_events(db: Session = Depends(get_db), admin: str = Depends(get_current_admin)):
    return db.query(Event).order_by(Event.created_at.desc()).all()


@router.get("/admin/events/{event_id}", response_model=EventResponse)
def get_event(event_id: str, db: Session = Depends(get_db), admin: str = Depends(get_current_admin)):
    return get_event_or_404(db, event_id)


@router.patch("/admin/events/{event_id}", response_model=EventResponse)
def update_event(
    event_id: str,
    updates: EventUpdate,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin)
):
    event = get_event_or_404(db, event_id)

    for field, value in updates.model_dump(exclude_unset=True).items():
        setattr(event, field, value)

    if event.registration_start and event.registration_end and event.registration_start >= event.registration_end:
        db.rollback()
        raise HTTPException(400, "Registration start must be before registration end")

    db.commit()
    db.refresh(event)
    return event


@router.delete("/admin/events/{event_id}")
def delete_event(event_id: str, db: Session = Depends(get_db), admin: str = Depends(get_current_admin)):
    """
    Delete an event and everything under it
    Scan ledgers reference QR codes and players, so they go first
    """
    event = get_event_or_404(db, event_id)
    name = event.name

    team_ids = [team.id for team in event.teams]
    qr_code_ids = [qr_code.id for qr_code in event.qr_codes]
    if team_ids:
        db.query(TeamClueOrder).filter(TeamClueOrder.team_id.in_(team_ids)).delete(synchronize_session=False)
        db.query(Scan).filter(Scan.team_id.in_(team_ids)).delete(synchronize_session=False)
        db.query(FakeQRScan).filter(FakeQRScan.team_id.in_(team_ids)).delete(synchronize_session=False)
    if qr_code_ids:
        db.query(FakeQRScan).filter(FakeQRScan.qr_code_id.in_(qr_code_ids)).delete(synchronize_session=False)

    db.delete(event)
    db.commit()
    logger.info("Deleted event %s", name)
    return {"success": True, "message": f"Event {name} deleted"}


@router.post("/admin/events/{event_id}/activate", response_model=EventResponse)
def activate_event(event_id: str, db: Session = Depends(get_db), admin: str = Depends(get_current_admin)):
    """Only one event can be active at a time, activating one deactivates the others"""
    event = get_event_or_404(db, event_id)

    db.query(Event).filter(Event.id != event_id).update({Event.is_active: False})
    event.is_active = True
    db.commit()
    db.refresh(event)
    logger.info("Event %s activated", event.name)
    return event


@router.post("/admin/events/{event_id}/deactivate", response_model=EventResponse)
def deactivate_event(event_id: str, db: Session = Depends(get_db), admin: str = Depends(get_current_admin)):
    """
    Deactivate an event
    Scans are rejected immediately, team progress is kept
    """
    event = get_event_or_404(db, event_id)
    event.is_active = False
    db.commit()
    db.refresh(event)
    logger.info("Event %s deactivated", event.name)
    return event


@router.post("/admin/events/{event_id}/start-hunt", response_model=HuntStartResponse)
def start_hunt(event_id: str, db: Session = Depends(get_db), admin: str = Depends(get_current_admin)):
    """
    Start (or restart) the hunt
    Generates a fresh clue order per team and resets every team's progress
    """
    summary = clue_order.start_hunt(db, event_id)
    return HuntStartResponse(
        message=f"Hunt started! {summary['teams_ready']} teams are ready with {summary['clues_per_team']} clues each.",
        **summary
    )


@router.post("/admin/events/{event_id}/stop-hunt")
def stop_hunt(event_id: str, db: Session = Depends(get_db), admin: str = Depends(get_current_admin)):
    clue_order.stop_hunt(db, event_id)
    return {"success": True, "message": "Hunt stopped successfully!"}
