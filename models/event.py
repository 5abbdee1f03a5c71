from sqlalchemy import Column, String, DateTime, Boolean, Integer
from sqlalchemy.orm import relationship
from datetime import datetime
import os
import uuid
from database.connection import Base

DEFAULT_HUNT_DURATION_MINUTES = int(os.getenv("DEFAULT_HUNT_DURATION_MINUTES", 60))
DEFAULT_HINT_DELAY_MINUTES = int(os.getenv("DEFAULT_HINT_DELAY_MINUTES", 5))


class Event(Base):
    """
    Event model - one scavenger hunt run by the organizers

    Only one event can be active at a time.
    hunt_started_at is null while the hunt is not running; it is set by the
    organizer when the hunt starts and the hunt lasts hunt_duration_minutes.
    """
    __tablename__ = "events"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    registration_start = Column(DateTime, nullable=True)
    registration_end = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=False)
    hunt_started_at = Column(DateTime, nullable=True)
    hunt_duration_minutes = Column(Integer, nullable=False, default=DEFAULT_HUNT_DURATION_MINUTES)
    hint_delay_minutes = Column(Integer, nullable=False, default=DEFAULT_HINT_DELAY_MINUTES)
    created_at = Column(DateTime, default=datetime.utcnow)

    clues = relationship("Clue", back_populates="event", cascade="all, delete-orphan")
    teams = relationship("Team", back_populates="event", cascade="all, delete-orphan")
    qr_codes = relationship("QRCode", back_populates="event", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Event(name={self.name}, active={self.is_active})>"
