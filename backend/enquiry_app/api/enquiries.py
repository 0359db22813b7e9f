import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, BackgroundTasks, HTTPException
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from enquiry_app.db.session import get_session
from enquiry_app.models.enquiry import (
    Enquiry,
    EnquiryNote,
    EnquiryStatus,
    EnquirySubmission,
    NoteType,
    SectionKey,
    SectionNote,
    STATUS_LABELS,
)
from enquiry_app.models.pricing import PriceRange
from enquiry_app.services.notifications import send_confirmation_emails
from enquiry_app.services.pricing import PriceEngine, format_price_range
from enquiry_app.services.validation import EnquiryValidator

logger = logging.getLogger(__name__)
router = APIRouter()

STATUS_LABELS_BY_VALUE = {s.value: label for s, label in STATUS_LABELS.items()}


class StatusUpdate(BaseModel):
    status: EnquiryStatus


# accept both noteType and note_type
class NoteCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content: str
    note_type: NoteType = NoteType.GENERAL
    created_by: Optional[str] = None


class SectionNoteCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content: str
    section_key: SectionKey
    created_by: Optional[str] = None


def _summary(e: Enquiry) -> Dict[str, Any]:
    status = e.status or EnquiryStatus.NEW.value
    return {
        "id": e.id,
        "createdAt": e.created_at.isoformat(),
        "updatedAt": e.updated_at.isoformat(),
        "status": status,
        "statusLabel": STATUS_LABELS_BY_VALUE.get(status, status),
        "fullName": e.full_name,
        "email": e.email,
        "phone": e.phone,
        "businessName": e.business_name,
        "websiteComplexity": e.website_complexity,
        "involvementLevel": e.involvement_level,
        "estimate": {"min": e.estimate_min, "max": e.estimate_max},
        "estimateFormatted": format_price_range(PriceRange(min=e.estimate_min, max=e.estimate_max)),
    }


def _note(n: EnquiryNote) -> Dict[str, Any]:
    return {
        "id": n.id,
        "enquiryId": n.enquiry_id,
        "noteType": n.note_type,
        "content": n.content,
        "createdBy": n.created_by,
        "createdAt": n.created_at.isoformat(),
    }


def _section_note(n: SectionNote) -> Dict[str, Any]:
    return {
        "id": n.id,
        "enquiryId": n.enquiry_id,
        "sectionKey": n.section_key,
        "content": n.content,
        "createdBy": n.created_by,
        "createdAt": n.created_at.isoformat(),
    }


def _get_or_404(session: Session, enquiry_id: int) -> Enquiry:
    enquiry = session.get(Enquiry, enquiry_id)
    if enquiry is None:
        logger.warning("Enquiry id=%s not found", enquiry_id)
        raise HTTPException(status_code=404, detail="Enquiry not found")
    return enquiry


@router.post("/", status_code=201)
def submit_enquiry(sub: EnquirySubmission, background_tasks: BackgroundTasks):
    """Validate, price and store a completed questionnaire, then send confirmations."""
    validation = EnquiryValidator().validate(sub)
    if validation["decision"] != "valid":
        logger.warning("Rejected enquiry submission issues=%s", validation["issues"])
        raise HTTPException(status_code=422, detail={"message": "Enquiry is incomplete", "issues": validation["issues"]})

    breakdown = PriceEngine().compute_breakdown(sub)

    session = get_session()
    try:
        enquiry = Enquiry(
            full_name=sub.full_name.strip(),
            email=sub.email.strip(),
            phone=sub.phone.strip(),
            preferred_contact=sub.preferred_contact,
            business_name=sub.business_name or None,
            website_complexity=sub.website_complexity,
            involvement_level=sub.involvement_level,
            answers=sub.model_dump_json(by_alias=True),
            estimate_min=breakdown.total.min,
            estimate_max=breakdown.total.max,
        )
        session.add(enquiry)
        session.commit()
        session.refresh(enquiry)
        result = _summary(enquiry)
        logger.info("Created enquiry id=%s total=%s", enquiry.id, format_price_range(breakdown.total))
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Failed to store enquiry: %s", e)
        raise HTTPException(status_code=500, detail="Failed to store enquiry")
    finally:
        session.close()

    # sent after the response; delivery problems are logged and never fail the submission
    background_tasks.add_task(send_confirmation_emails, result["id"], sub, breakdown)

    return {**result, "breakdown": breakdown}


@router.get("/")
def list_enquiries(status: str = "all"):
    if status != "all" and status not in {s.value for s in EnquiryStatus}:
        raise HTTPException(status_code=422, detail=f"Unknown status: {status}")

    session = get_session()
    try:
        query = select(Enquiry)
        if status != "all":
            query = query.where(Enquiry.status == status)
        query = query.order_by(col(Enquiry.created_at).desc(), col(Enquiry.id).desc())
        rows = session.exec(query).all()
        return [_summary(e) for e in rows]
    finally:
        session.close()


@router.get("/{enquiry_id}")
def get_enquiry(enquiry_id: int):
    session = get_session()
    try:
        enquiry = _get_or_404(session, enquiry_id)
        # the stored snapshot is informational; always re-price from the answers
        breakdown = PriceEngine().compute_breakdown(enquiry.submission())
        notes = session.exec(
            select(EnquiryNote).where(EnquiryNote.enquiry_id == enquiry_id).order_by(col(EnquiryNote.id))
        ).all()
        section_notes = session.exec(
            select(SectionNote).where(SectionNote.enquiry_id == enquiry_id).order_by(col(SectionNote.id))
        ).all()
        return {
            **_summary(enquiry),
            "answers": json.loads(enquiry.answers),
            "breakdown": breakdown,
            "notes": [_note(n) for n in notes],
            "sectionNotes": [_section_note(n) for n in section_notes],
        }
    finally:
        session.close()


@router.put("/{enquiry_id}/status")
def update_status(enquiry_id: int, upd: StatusUpdate):
    session = get_session()
    try:
        enquiry = _get_or_404(session, enquiry_id)
        previous = enquiry.status
        enquiry.status = upd.status.value
        enquiry.updated_at = datetime.now(timezone.utc)
        session.add(enquiry)
        session.commit()
        session.refresh(enquiry)
        logger.info("Enquiry id=%s status %s -> %s", enquiry_id, previous, enquiry.status)
        return _summary(enquiry)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Failed to update status for enquiry id=%s: %s", enquiry_id, e)
        raise HTTPException(status_code=500, detail="Failed to update enquiry status")
    finally:
        session.close()


@router.post("/{enquiry_id}/notes", status_code=201)
def add_note(enquiry_id: int, note: NoteCreate):
    if not note.content.strip():
        raise HTTPException(status_code=422, detail="Note content is required")

    session = get_session()
    try:
        _get_or_404(session, enquiry_id)
        record = EnquiryNote(
            enquiry_id=enquiry_id,
            note_type=note.note_type.value,
            content=note.content.strip(),
            created_by=note.created_by,
        )
        session.add(record)
        session.commit()
        session.refresh(record)
        logger.info("Added %s note id=%s to enquiry id=%s", record.note_type, record.id, enquiry_id)
        return _note(record)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Failed to store note for enquiry id=%s: %s", enquiry_id, e)
        raise HTTPException(status_code=500, detail="Failed to store note")
    finally:
        session.close()


@router.get("/{enquiry_id}/notes")
def list_notes(enquiry_id: int):
    session = get_session()
    try:
        _get_or_404(session, enquiry_id)
        rows = session.exec(
            select(EnquiryNote).where(EnquiryNote.enquiry_id == enquiry_id).order_by(col(EnquiryNote.id))
        ).all()
        return [_note(n) for n in rows]
    finally:
        session.close()


@router.post("/{enquiry_id}/section-notes", status_code=201)
def add_section_note(enquiry_id: int, note: SectionNoteCreate):
    if not note.content.strip():
        raise HTTPException(status_code=422, detail="Note content is required")

    session = get_session()
    try:
        _get_or_404(session, enquiry_id)
        record = SectionNote(
            enquiry_id=enquiry_id,
            section_key=note.section_key.value,
            content=note.content.strip(),
            created_by=note.created_by,
        )
        session.add(record)
        session.commit()
        session.refresh(record)
        logger.info("Added section note id=%s section=%s to enquiry id=%s", record.id, record.section_key, enquiry_id)
        return _section_note(record)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Failed to store section note for enquiry id=%s: %s", enquiry_id, e)
        raise HTTPException(status_code=500, detail="Failed to store section note")
    finally:
        session.close()


@router.get("/{enquiry_id}/section-notes")
def list_section_notes(enquiry_id: int, section: Optional[SectionKey] = None):
    session = get_session()
    try:
        _get_or_404(session, enquiry_id)
        query = select(SectionNote).where(SectionNote.enquiry_id == enquiry_id)
        if section is not None:
            query = query.where(SectionNote.section_key == section.value)
        rows = session.exec(query.order_by(col(SectionNote.id))).all()
        return [_section_note(n) for n in rows]
    finally:
        session.close()
