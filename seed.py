from database.connection import SessionLocal, engine, Base
import models  # noqa: F401
from models.clue import Clue
from models.event import Event
from models.qr_code import QRCode
from models.team import Team
from utils.tokens import generate_qr_token, generate_fake_token, team_name

DEMO_CLUES = [
    ("Where books sleep in rows and whispers are the rule.", "Library", "Check the returns desk."),
    ("I hold the water that nobody drinks but everybody sees.", "Fountain", "Look near the benches."),
    ("Count the steps to the place where the bell once rang.", "Old tower", "Ground floor, by the door."),
    ("Bread and coffee, the smell gives me away.", "Cafeteria", "Under the menu board."),
]


def seed_database():
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()

    try:
        existing = db.query(Event).filter(Event.name == "Demo Hunt").first()
        if existing:
            print("Demo event already exists. Removing it...")
            db.delete(existing)
            db.commit()

        db.query(Event).update({Event.is_active: False})
        event = Event(name="Demo Hunt", is_active=True, hunt_duration_minutes=60, hint_delay_minutes=5)
        db.add(event)
        db.flush()

        for step_number, (text, location, hint) in enumerate(DEMO_CLUES, start=1):
            clue = Clue(event_id=event.id, step_number=step_number, text=text,
                        location_hint=location, timed_hint_text=hint)
            db.add(clue)
            db.flush()
            db.add(QRCode(event_id=event.id, clue_id=clue.id, token=generate_qr_token()))

        db.add(QRCode(event_id=event.id, token=generate_fake_token(), is_fake=True,
                      label="Rickroll", redirect_url="https://www.youtube.com/watch?v=dQw4w9WgXcQ"))

        for number in range(1, 5):
            db.add(Team(event_id=event.id, name=team_name("Team", number)))
            db.flush()

        db.commit()

        print(f"✓ Event created: {event.name} (ID: {event.id})")
        print(f"✓ Clues: {len(DEMO_CLUES)}, teams: 4, fake QR codes: 1")
        print("\nStart the hunt from the admin API when the teams are registered.")

    except Exception as e:
        print(f"Error while seeding database: {e}")
        db.rollback()
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
