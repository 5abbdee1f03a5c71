"""
Scan validation and team progression

A scan advances a team only when it matches the clue at the team's current
step. The Scan row insert is the serialization point: the (team_id, clue_id)
unique constraint lets exactly one of two concurrent identical scans through,
and the team update is conditional on the step that was read.
"""
import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from models.clue import Clue
from models.event import Event
from models.qr_code import QRCode, FakeQRScan
from models.scan import Scan
from models.team import Team
from models.team_clue_order import TeamClueOrder
from services import hunt_clock, notifications
from services.errors import (
    AlreadyScanned, Disqualified, EventInactive, EventNotFound, HuntAlreadyComplete,
    HuntNotStarted, HuntTimedOut, InvalidToken, PersistenceError, TeamNotFound, WrongClue,
)

logger = logging.getLogger(__name__)

POINTS_PER_CLUE = 10
POINTS_WITH_HINT = 5


class TeamState(str, enum.Enum):
    WAITING_FOR_HUNT_START = "waiting_for_hunt_start"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    DISQUALIFIED = "disqualified"


@dataclass
class ScanSuccess:
    points_earned: int
    new_score: int
    new_step: int
    is_complete: bool
    hint_used: bool
    outcome: str = "advanced"


@dataclass
class DecoyResult:
    redirect_url: Optional[str]
    label: Optional[str]
    outcome: str = "decoy"


def total_clues(db: Session, event_id: str) -> int:
    return db.query(Clue).filter(Clue.event_id == event_id).count()


def team_state(team: Team, event: Event, clue_count: int, now: datetime) -> TeamState:
    if team.is_disqualified:
        return TeamState.DISQUALIFIED
    if clue_count and team.current_step >= clue_count:
        return TeamState.COMPLETED
    if event.hunt_started_at is None:
        return TeamState.WAITING_FOR_HUNT_START
    if hunt_clock.hunt_has_expired(event, now):
        return TeamState.TIMED_OUT
    return TeamState.IN_PROGRESS


def load_playable_team(db: Session, team_id: str, now: datetime):
    """Load a team and its event, rejecting when play is not allowed right now"""
    team = db.query(Team).filter(Team.id == team_id).first()
    if not team:
        raise TeamNotFound()
    if team.is_disqualified:
        raise Disqualified()

    event = db.query(Event).filter(Event.id == team.event_id).first()
    if not event:
        raise EventNotFound()
    if not hunt_clock.event_is_active(event):
        raise EventInactive()
    if event.hunt_started_at is None:
        raise HuntNotStarted()
    if hunt_clock.hunt_has_expired(event, now):
        raise HuntTimedOut()
    return team, event


def _record_decoy(db: Session, qr_code: QRCode, team: Team, player_id: Optional[str]) -> DecoyResult:
    db.add(FakeQRScan(qr_code_id=qr_code.id, team_id=team.id, player_id=player_id))
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to record decoy scan for team %s", team.id)
        raise PersistenceError()

    logger.info("Team %s scanned decoy %s", team.id, qr_code.label)
    notifications.bus.publish(notifications.DECOY_SCANNED, team.event_id, team.id,
                              label=qr_code.label, player_id=player_id)
    return DecoyResult(redirect_url=qr_code.redirect_url, label=qr_code.label)


def _already_scanned(db: Session, team_id: str, clue_id: str) -> bool:
    return db.query(Scan.id).filter(Scan.team_id == team_id, Scan.clue_id == clue_id).first() is not None


def submit_scan(db: Session, token: str, team_id: str, player_id: Optional[str] = None,
                now: Optional[datetime] = None):
    """
    Validate a scanned QR token for a team and advance it on success

    Returns ScanSuccess or DecoyResult, raises a HuntError subclass otherwise.
    """
    now = now or datetime.utcnow()
    team, event = load_playable_team(db, team_id, now)

    qr_code = db.query(QRCode).filter(
        QRCode.token == token,
        QRCode.event_id == team.event_id
    ).first()
    if not qr_code:
        raise InvalidToken()

    if qr_code.is_fake:
        return _record_decoy(db, qr_code, team, player_id)

    expected = db.query(TeamClueOrder).filter(
        TeamClueOrder.team_id == team.id,
        TeamClueOrder.step_index == team.current_step
    ).first()
    if not expected:
        raise HuntAlreadyComplete()

    if qr_code.clue_id != expected.clue_id:
        raise WrongClue()

    if _already_scanned(db, team.id, expected.clue_id):
        raise AlreadyScanned()

    read_step = team.current_step
    hint_used = bool(expected.hint_viewed)
    points_earned = POINTS_WITH_HINT if hint_used else POINTS_PER_CLUE
    is_complete = read_step + 1 >= total_clues(db, team.event_id)

    values = {
        Team.score: Team.score + points_earned,
        Team.current_step: Team.current_step + 1,
    }
    if is_complete:
        values[Team.hunt_finished_at] = now

    try:
        db.add(Scan(team_id=team.id, clue_id=expected.clue_id, qr_code_id=qr_code.id,
                    player_id=player_id, scanned_at=now))
        db.flush()

        advanced = db.query(Team).filter(
            Team.id == team.id,
            Team.current_step == read_step
        ).update(values, synchronize_session=False)
        if advanced != 1:
            db.rollback()
            raise AlreadyScanned()

        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Concurrent duplicate scan rejected for team %s clue %s", team.id, expected.clue_id)
        raise AlreadyScanned()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to commit scan for team %s", team.id)
        raise PersistenceError("Failed to record scan")

    db.refresh(team)
    logger.info("Team %s advanced to step %d (+%d)", team.id, team.current_step, points_earned)

    notifications.bus.publish(notifications.TEAM_ADVANCED, team.event_id, team.id,
                              step=team.current_step, score=team.score, points=points_earned)
    if is_complete:
        notifications.bus.publish(notifications.TEAM_COMPLETED, team.event_id, team.id, score=team.score)

    return ScanSuccess(
        points_earned=points_earned,
        new_score=team.score,
        new_step=team.current_step,
        is_complete=is_complete,
        hint_used=hint_used,
    )
