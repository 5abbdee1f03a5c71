"""
Hunt start/stop and per-team clue order generation

Each team gets a full permutation of the event's clues. The first clue is
assigned round-robin (team i starts at catalog position i mod C) so teams
spread out, the remaining clues are shuffled independently per team.
"""
import logging
import random
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.clue import Clue
from models.event import Event
from models.scan import Scan
from models.team import Team
from models.team_clue_order import TeamClueOrder
from services import notifications
from services.errors import EventInactive, EventNotFound, NoCluesConfigured, PersistenceError

logger = logging.getLogger(__name__)


def build_order(clue_ids: List[str], start_offset: int, rng: random.Random) -> List[str]:
    """Rotate the catalog to start_offset, keep that first clue, shuffle the rest"""
    rotated = clue_ids[start_offset:] + clue_ids[:start_offset]
    remaining = rotated[1:]
    rng.shuffle(remaining)
    return [rotated[0]] + remaining


def event_teams(db: Session, event_id: str) -> List[Team]:
    """Teams in creation order, the order round-robin offsets are assigned in"""
    return db.query(Team).filter(Team.event_id == event_id).order_by(
        Team.created_at.asc(), Team.name.asc()
    ).all()


def event_clues(db: Session, event_id: str) -> List[Clue]:
    return db.query(Clue).filter(Clue.event_id == event_id).order_by(
        Clue.step_number.asc(), Clue.created_at.asc()
    ).all()


def generate(db: Session, event_id: str, rng: Optional[random.Random] = None) -> Dict[str, int]:
    """
    Clear and regenerate the clue order of every team in the event

    Restarting is a full reset: previous orders and scans are deleted and every
    team goes back to step 0 with a score of 0. Nothing is committed here, the
    caller commits or rolls back the whole unit.
    """
    rng = rng or random.Random()

    clues = event_clues(db, event_id)
    if not clues:
        raise NoCluesConfigured()

    teams = event_teams(db, event_id)
    team_ids = [team.id for team in teams]
    clue_ids = [clue.id for clue in clues]

    if team_ids:
        db.query(TeamClueOrder).filter(TeamClueOrder.team_id.in_(team_ids)).delete(synchronize_session=False)
        db.query(Scan).filter(Scan.team_id.in_(team_ids)).delete(synchronize_session=False)

    logger.info("Generating clue order for %d teams with %d clues", len(teams), len(clues))

    for team_index, team in enumerate(teams):
        start_offset = team_index % len(clue_ids)
        order = build_order(clue_ids, start_offset, rng)
        logger.debug("Team %s starts at offset %d (clue %s)", team.name, start_offset, order[0])

        for step_index, clue_id in enumerate(order):
            db.add(TeamClueOrder(team_id=team.id, clue_id=clue_id, step_index=step_index))

        team.current_step = 0
        team.score = 0
        team.hunt_finished_at = None

    return {"teams_ready": len(teams), "clues_per_team": len(clues)}


def start_hunt(db: Session, event_id: str, rng: Optional[random.Random] = None,
               now: Optional[datetime] = None) -> Dict[str, int]:
    now = now or datetime.utcnow()

    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise EventNotFound()
    if not event.is_active:
        raise EventInactive("Event must be active to start the hunt")

    try:
        summary = generate(db, event_id, rng=rng)
        event.hunt_started_at = now
        db.commit()
    except NoCluesConfigured:
        db.rollback()
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to start hunt for event %s", event_id)
        raise PersistenceError("Failed to generate clue orders")

    logger.info("Hunt started for event %s: %d teams, %d clues each",
                event_id, summary["teams_ready"], summary["clues_per_team"])
    notifications.bus.publish(notifications.HUNT_STARTED, event_id, **summary)
    return summary


def stop_hunt(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise EventNotFound()

    event.hunt_started_at = None
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to stop hunt for event %s", event_id)
        raise PersistenceError("Failed to stop hunt")
    db.refresh(event)

    logger.info("Hunt stopped for event %s", event_id)
    notifications.bus.publish(notifications.HUNT_STOPPED, event_id)
    return event
