from database.connection import Base
from models.event import Event
from models.clue import Clue
from models.team import Team
from models.player import Player
from models.team_clue_order import TeamClueOrder
from models.scan import Scan
from models.qr_code import QRCode, FakeQRScan

__all__ = ["Base", "Event", "Clue", "Team", "Player", "TeamClueOrder", "Scan", "QRCode", "FakeQRScan"]
