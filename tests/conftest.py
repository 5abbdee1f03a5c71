"""
Test configuration and fixtures
"""
import pytest
from datetime import datetime
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from database.connection import Base, get_db

# Import all models BEFORE importing app to ensure they're registered
from models.event import Event
from models.clue import Clue
from models.team import Team
from models.player import Player
from models.qr_code import QRCode

from main import app
from services import notifications
from utils.auth import create_player_token

# Test database (file-based SQLite for better connection handling)
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    echo=False  # Set to True to debug SQL
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """Create a test client with test database"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def clean_bus():
    notifications.bus.clear()
    yield
    notifications.bus.clear()


@pytest.fixture
def admin_headers(client):
    response = client.post("/admin/login", json={"username": "admin", "password": "hunt2024"})
    return {"Authorization": f"Bearer {response.json()['token']}"}


def make_event(db, clue_count=3, team_count=2, is_active=True, token_prefix="QR_TEST", **fields):
    """
    Create an event with clue_count clues (each with a QR code) and team_count
    teams, every team with one player. Returns a dict with the created rows.
    """
    event = Event(name=fields.pop("name", "Test Hunt"), is_active=is_active, **fields)
    db.add(event)
    db.flush()

    clues, qr_codes = [], []
    for step_number in range(1, clue_count + 1):
        clue = Clue(
            event_id=event.id,
            step_number=step_number,
            text=f"Clue {step_number}",
            location_hint=f"Place {step_number}",
            timed_hint_text=f"Hint {step_number}"
        )
        db.add(clue)
        db.flush()
        qr_code = QRCode(event_id=event.id, clue_id=clue.id, token=f"{token_prefix}_{step_number:03d}")
        db.add(qr_code)
        clues.append(clue)
        qr_codes.append(qr_code)

    teams, players = [], []
    for number in range(1, team_count + 1):
        team = Team(event_id=event.id, name=f"Team {number:03d}")
        db.add(team)
        db.flush()
        player = Player(
            team_id=team.id,
            name=f"Player {number}",
            username=f"player_{number}",
            password_hash=Player.hash_password("secret")
        )
        db.add(player)
        db.flush()
        teams.append(team)
        players.append(player)

    db.commit()
    return {
        "event": event,
        "clues": clues,
        "qr_codes": qr_codes,
        "teams": teams,
        "players": players,
        "tokens": {clue.id: qr.token for clue, qr in zip(clues, qr_codes)},
    }


def player_headers(player):
    return {"Authorization": f"Bearer {create_player_token(player.id, player.team_id)}"}


def start(db, hunt, now=None):
    """Start the hunt directly through the engine"""
    from services import clue_order
    clue_order.start_hunt(db, hunt["event"].id, now=now or datetime.utcnow())
