from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import os

from database.connection import get_db
from models.clue import Clue
from models.qr_code import QRCode
from routes.admin import get_current_admin, get_event_or_404
from schemas.qr_code import FakeQRCreate, QRCodeResponse, ClueQRCode
from utils.tokens import generate_qr_token, generate_fake_token

router = APIRouter()

APP_URL = os.getenv("APP_URL", "http://localhost:3000")


def scan_url(token: str) -> str:
    return f"{APP_URL}/scan?token={token}"


@router.post("/admin/events/{event_id}/qr-codes", response_model=list[ClueQRCode])
def generate_qr_codes(event_id: str, db: Session = Depends(get_db), admin: str = Depends(get_current_admin)):
    """
    Issue one token per clue
    Clues that already have a token keep it, so printed codes stay valid
    """
    get_event_or_404(db, event_id)

    clues = db.query(Clue).filter(Clue.event_id == event_id).order_by(Clue.step_number.asc()).all()
    if not clues:
        raise HTTPException(status_code=404, detail="No clues found for this event")

    result = []
    for clue in clues:
        qr_code = db.query(QRCode).filter(QRCode.clue_id == clue.id, QRCode.is_fake == False).first()
        if not qr_code:
            qr_code = QRCode(event_id=event_id, clue_id=clue.id, token=generate_qr_token())
            db.add(qr_code)
        result.append(ClueQRCode(
            clue_id=clue.id,
            step_number=clue.step_number,
            token=qr_code.token,
            scan_url=scan_url(qr_code.token)
        ))

    db.commit()
    return result


@router.get("/admin/events/{event_id}/qr-codes/fake", response_model=list[QRCodeResponse])
def list_fake_qr_codes(event_id: str, db: Session = Depends(get_db), admin: str = Depends(get_current_admin)):
    get_event_or_404(db, event_id)
    return db.query(QRCode).filter(
        QRCode.event_id == event_id,
        QRCode.is_fake == True
    ).order_by(QRCode.created_at.asc()).all()


@router.post("/admin/events/{event_id}/qr-codes/fake", response_model=QRCodeResponse)
def create_fake_qr_code(
    event_id: str,
    request: FakeQRCreate,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin)
):
    get_event_or_404(db, event_id)

    qr_code = QRCode(
        event_id=event_id,
        clue_id=None,
        token=generate_fake_token(),
        is_fake=True,
        redirect_url=request.redirect_url,
        label=request.label
    )
    db.add(qr_code)
    db.commit()
    db.refresh(qr_code)
    return qr_code


@router.delete("/admin/qr-codes/{qr_code_id}")
def delete_fake_qr_code(qr_code_id: str, db: Session = Depends(get_db), admin: str = Depends(get_current_admin)):
    qr_code = db.query(QRCode).filter(QRCode.id == qr_code_id).first()
    if not qr_code:
        raise HTTPException(status_code=404, detail="QR code not found")
    if not qr_code.is_fake:
        raise HTTPException(status_code=400, detail="Only fake QR codes can be deleted")

    db.delete(qr_code)
    db.commit()
    return {"success": True, "message": "Fake QR code deleted"}
