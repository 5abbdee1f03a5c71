from sqlalchemy import Column, String, DateTime, Boolean, Integer, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import os
import uuid

from database.connection import Base

DEFAULT_MAX_PLAYERS = int(os.getenv("DEFAULT_MAX_PLAYERS", 2))


class Team(Base):
    __tablename__ = "teams"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String, ForeignKey("events.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    score = Column(Integer, nullable=False, default=0)
    current_step = Column(Integer, nullable=False, default=0)
    is_disqualified = Column(Boolean, default=False)
    max_players = Column(Integer, nullable=False, default=DEFAULT_MAX_PLAYERS)
    hunt_finished_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    event = relationship("Event", back_populates="teams")
    players = relationship("Player", back_populates="team", cascade="all, delete-orphan")
    clue_order = relationship(
        "TeamClueOrder",
        back_populates="team",
        cascade="all, delete-orphan",
        order_by="TeamClueOrder.step_index",
    )
    scans = relationship("Scan", back_populates="team", cascade="all, delete-orphan")
