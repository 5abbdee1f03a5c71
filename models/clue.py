from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from database.connection import Base


class Clue(Base):
    """
    Clue model - one stop of the hunt

    step_number is the organizer-facing display order only; each team plays
    the clues in its own order (see TeamClueOrder).
    """
    __tablename__ = "clues"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String, ForeignKey("events.id"), nullable=False, index=True)
    step_number = Column(Integer, nullable=False)
    text = Column(Text, nullable=False)
    location_hint = Column(String, nullable=True)
    timed_hint_text = Column(Text, nullable=True)
    answer_notes = Column(Text, nullable=True)  # Admin only
    created_at = Column(DateTime, default=datetime.utcnow)

    event = relationship("Event", back_populates="clues")
    qr_codes = relationship("QRCode", back_populates="clue", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Clue(step_number={self.step_number}, event_id={self.event_id})>"
