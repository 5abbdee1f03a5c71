from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database.connection import get_db
from models.clue import Clue
from models.event import Event
from models.scan import Scan
from models.team_clue_order import TeamClueOrder
from routes.admin import get_current_admin, get_event_or_404
from schemas.clue import ClueCreate, ClueUpdate, ClueAdminResponse

router = APIRouter()


def get_clue_or_404(db: Session, clue_id: str) -> Clue:
    clue = db.query(Clue).filter(Clue.id == clue_id).first()
    if not clue:
        raise HTTPException(status_code=404, detail="Clue not found")
    return clue


@router.get("/admin/events/{event_id}/clues", response_model=list[ClueAdminResponse])
def list_clues(event_id: str, db: Session = Depends(get_db), admin: str = Depends(get_current_admin)):
    get_event_or_404(db, event_id)
    return db.query(Clue).filter(Clue.event_id == event_id).order_by(
        Clue.step_number.asc(), Clue.created_at.asc()
    ).all()


@router.post("/admin/events/{event_id}/clues", response_model=ClueAdminResponse)
def create_clue(
    event_id: str,
    clue: ClueCreate,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin)
):
    event = get_event_or_404(db, event_id)
    if event.hunt_started_at is not None:
        raise HTTPException(409, "Stop the hunt before adding clues")

    db_clue = Clue(event_id=event_id, **clue.model_dump())
    db.add(db_clue)
    db.commit()
    db.refresh(db_clue)
    return db_clue


@router.patch("/admin/clues/{clue_id}", response_model=ClueAdminResponse)
def update_clue(
    clue_id: str,
    updates: ClueUpdate,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin)
):
    """Text edits are allowed mid-hunt, they never change any team's order"""
    clue = get_clue_or_404(db, clue_id)

    for field, value in updates.model_dump(exclude_unset=True).items():
        setattr(clue, field, value)

    db.commit()
    db.refresh(clue)
    return clue


@router.delete("/admin/clues/{clue_id}")
def delete_clue(clue_id: str, db: Session = Depends(get_db), admin: str = Depends(get_current_admin)):
    clue = get_clue_or_404(db, clue_id)
    event = db.query(Event).filter(Event.id == clue.event_id).first()
    if event and event.hunt_started_at is not None:
        raise HTTPException(409, "Stop the hunt before deleting clues")

    # Orders from a previous run are regenerated at the next start
    db.query(TeamClueOrder).filter(TeamClueOrder.clue_id == clue_id).delete(synchronize_session=False)
    db.query(Scan).filter(Scan.clue_id == clue_id).delete(synchronize_session=False)
    db.delete(clue)
    db.commit()
    return {"success": True, "message": "Clue deleted"}
