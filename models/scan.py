from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from database.connection import Base


class Scan(Base):
    """
    Scan model - append-only ledger of accepted scans

    The (team_id, clue_id) unique constraint is the serialization point for
    concurrent scans of the same clue.
    """
    __tablename__ = "scans"
    __table_args__ = (
        UniqueConstraint("team_id", "clue_id", name="uq_scans_team_clue"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    team_id = Column(String, ForeignKey("teams.id"), nullable=False, index=True)
    clue_id = Column(String, ForeignKey("clues.id"), nullable=False)
    qr_code_id = Column(String, ForeignKey("qr_codes.id"), nullable=False)
    player_id = Column(String, ForeignKey("players.id"), nullable=True)
    scanned_at = Column(DateTime, default=datetime.utcnow)

    team = relationship("Team", back_populates="scans")
