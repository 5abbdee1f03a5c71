"""
Timed hints

A hint unlocks hint_delay_minutes after the team first opened the clue.
Viewing it is permanent for that (team, clue) pair and makes the clue worth
the reduced amount when it is scanned. Score itself is only changed by scans.
"""
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.clue import Clue
from models.event import Event
from models.team import Team
from models.team_clue_order import TeamClueOrder
from services import notifications
from services.errors import (
    Disqualified, EventNotFound, HintNotYetAvailable, HuntNotStarted, NotFound,
    PersistenceError, TeamNotFound, WrongClue,
)

logger = logging.getLogger(__name__)


@dataclass
class HintResult:
    hint_text: Optional[str]
    already_viewed: bool


def hint_seconds_remaining(clue_order: TeamClueOrder, event: Event, now: datetime) -> Optional[int]:
    """
    Seconds until the hint unlocks, 0 once available, None while the clue
    has not been opened yet
    """
    if clue_order.hint_viewed:
        return 0
    if clue_order.clue_started_at is None:
        return None
    unlocks_at = clue_order.clue_started_at + timedelta(minutes=event.hint_delay_minutes)
    if now >= unlocks_at:
        return 0
    return math.ceil((unlocks_at - now).total_seconds())


def mark_clue_started(db: Session, team_id: str, clue_order_id: str,
                      now: Optional[datetime] = None) -> TeamClueOrder:
    """Set clue_started_at the first time, later calls return the stored row"""
    now = now or datetime.utcnow()

    clue_order = db.query(TeamClueOrder).filter(
        TeamClueOrder.id == clue_order_id,
        TeamClueOrder.team_id == team_id
    ).first()
    if not clue_order:
        raise NotFound()

    if clue_order.clue_started_at is not None:
        return clue_order

    # Only the clue the team is currently looking for can start its hint timer
    team = db.query(Team).filter(Team.id == team_id).first()
    if not team or team.current_step != clue_order.step_index:
        raise WrongClue("This is not your current clue")

    try:
        db.query(TeamClueOrder).filter(
            TeamClueOrder.id == clue_order_id,
            TeamClueOrder.clue_started_at.is_(None)
        ).update({TeamClueOrder.clue_started_at: now}, synchronize_session=False)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to start clue order %s", clue_order_id)
        raise PersistenceError("Failed to start clue")

    db.refresh(clue_order)
    return clue_order


def view_hint(db: Session, team_id: str, clue_id: str, player_id: Optional[str] = None,
              now: Optional[datetime] = None) -> HintResult:
    now = now or datetime.utcnow()

    team = db.query(Team).filter(Team.id == team_id).first()
    if not team:
        raise TeamNotFound()
    if team.is_disqualified:
        raise Disqualified()

    event = db.query(Event).filter(Event.id == team.event_id).first()
    if not event:
        raise EventNotFound()
    if event.hunt_started_at is None:
        raise HuntNotStarted()

    clue_order = db.query(TeamClueOrder).filter(
        TeamClueOrder.team_id == team_id,
        TeamClueOrder.clue_id == clue_id
    ).first()
    if not clue_order:
        raise NotFound()

    clue = db.query(Clue).filter(Clue.id == clue_id).first()
    hint_text = clue.timed_hint_text if clue else None

    if clue_order.hint_viewed:
        return HintResult(hint_text=hint_text, already_viewed=True)

    remaining = hint_seconds_remaining(clue_order, event, now)
    if remaining is None:
        raise HintNotYetAvailable("Open the clue first to start the hint timer",
                                  remaining_seconds=event.hint_delay_minutes * 60)
    if remaining > 0:
        raise HintNotYetAvailable(
            f"Hint not available yet. Wait {math.ceil(remaining / 60)} more minutes.",
            remaining_seconds=remaining,
        )

    clue_order.hint_viewed = True
    clue_order.hint_viewed_at = now
    clue_order.hint_viewed_by = player_id
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to record hint view for team %s clue %s", team_id, clue_id)
        raise PersistenceError("Failed to view hint")

    logger.info("Team %s viewed hint for clue %s", team_id, clue_id)
    notifications.bus.publish(notifications.HINT_VIEWED, team.event_id, team_id,
                              clue_id=clue_id, player_id=player_id)
    return HintResult(hint_text=hint_text, already_viewed=False)
