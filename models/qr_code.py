from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from database.connection import Base


class QRCode(Base):
    """
    QRCode model - a printed token

    Real codes point at a clue. Fake codes (is_fake) have no clue and only
    redirect the scanner to redirect_url.
    """
    __tablename__ = "qr_codes"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String, ForeignKey("events.id"), nullable=False, index=True)
    clue_id = Column(String, ForeignKey("clues.id"), nullable=True)
    token = Column(String, unique=True, nullable=False, index=True)
    is_fake = Column(Boolean, default=False)
    redirect_url = Column(String, nullable=True)
    label = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    event = relationship("Event", back_populates="qr_codes")
    clue = relationship("Clue", back_populates="qr_codes")
    fake_scans = relationship("FakeQRScan", back_populates="qr_code", cascade="all, delete-orphan")


class FakeQRScan(Base):
    __tablename__ = "fake_qr_scans"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    qr_code_id = Column(String, ForeignKey("qr_codes.id"), nullable=False)
    team_id = Column(String, ForeignKey("teams.id"), nullable=False)
    player_id = Column(String, ForeignKey("players.id"), nullable=True)
    scanned_at = Column(DateTime, default=datetime.utcnow)

    qr_code = relationship("QRCode", back_populates="fake_scans")
