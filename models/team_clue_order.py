from sqlalchemy import Column, String, DateTime, Boolean, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid

from database.connection import Base


class TeamClueOrder(Base):
    """
    TeamClueOrder model - one step of a team's personal traversal

    For a team, step_index runs 0..N-1 and clue_id covers every clue of the
    event exactly once. clue_started_at anchors the hint delay.
    """
    __tablename__ = "team_clue_order"
    __table_args__ = (
        UniqueConstraint("team_id", "clue_id", name="uq_team_clue_order_team_clue"),
        UniqueConstraint("team_id", "step_index", name="uq_team_clue_order_team_step"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    team_id = Column(String, ForeignKey("teams.id"), nullable=False, index=True)
    clue_id = Column(String, ForeignKey("clues.id"), nullable=False)
    step_index = Column(Integer, nullable=False)
    clue_started_at = Column(DateTime, nullable=True)
    hint_viewed = Column(Boolean, nullable=False, default=False)
    hint_viewed_at = Column(DateTime, nullable=True)
    hint_viewed_by = Column(String, ForeignKey("players.id"), nullable=True)

    team = relationship("Team", back_populates="clue_order")
    clue = relationship("Clue")
