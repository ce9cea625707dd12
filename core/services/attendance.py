"""Attendance marks and per-player practice notes, keyed by (session, player)."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from core.models import Attendance, Player, PlayerNote, Practice, PracticeSession, utcnow
from core.services.catalog import ATTENDED_STATUSES

logger = logging.getLogger(__name__)


def _upsert_attendance_row(s: Session, record: dict[str, Any]) -> int:
    row = s.execute(
        select(Attendance).where(
            Attendance.session_id == record["session_id"],
            Attendance.player_id == record["player_id"],
        )
    ).scalar_one_or_none()
    if row is None:
        row = Attendance(session_id=record["session_id"], player_id=record["player_id"])
        s.add(row)
    row.status = record.get("status") or "present"
    row.notes = record.get("notes")
    s.flush()
    return row.id


def upsert_attendance(s: Session, records: Iterable[dict[str, Any]], atomic: bool = True) -> list[int]:
    """Insert or replace attendance marks, returning row ids in input order.

    Atomic batches leave committing to the caller's scope, so one bad record
    discards the whole batch. Non-atomic batches commit record by record and
    keep earlier writes when a later record fails.
    """
    ids: list[int] = []
    for record in records:
        ids.append(_upsert_attendance_row(s, record))
        if not atomic:
            s.commit()
    logger.info("attendance_batch_upserted", extra={"records": len(ids), "atomic": atomic})
    return ids


def upsert_player_note(s: Session, session_id: int, player_id: int, notes: str) -> int:
    row = s.execute(
        select(PlayerNote).where(PlayerNote.session_id == session_id, PlayerNote.player_id == player_id)
    ).scalar_one_or_none()
    now = utcnow()
    if row is None:
        row = PlayerNote(session_id=session_id, player_id=player_id, created_at=now)
        s.add(row)
    row.notes = notes
    row.updated_at = now
    s.flush()
    logger.info("player_note_saved", extra={"session_id": session_id, "player_id": player_id, "note_id": row.id})
    return row.id


def note_to_dict(note: PlayerNote) -> dict[str, Any]:
    return {
        "id": note.id,
        "session_id": note.session_id,
        "player_id": note.player_id,
        "notes": note.notes or "",
        "created_at": note.created_at,
        "updated_at": note.updated_at,
    }


def get_player_note(s: Session, session_id: int, player_id: int) -> dict[str, Any]:
    row = s.execute(
        select(PlayerNote).where(PlayerNote.session_id == session_id, PlayerNote.player_id == player_id)
    ).scalar_one_or_none()
    if row is None:
        return {"session_id": session_id, "player_id": player_id, "notes": ""}
    return note_to_dict(row)


def list_player_notes(s: Session, player_id: int) -> list[dict[str, Any]]:
    rows = s.execute(
        select(PlayerNote, PracticeSession.practice_name, PracticeSession.start_time)
        .join(PracticeSession, PracticeSession.id == PlayerNote.session_id)
        .where(PlayerNote.player_id == player_id)
        .order_by(PracticeSession.start_time.desc(), PlayerNote.id.desc())
    ).all()
    history = []
    for note, practice_name, start_time in rows:
        item = note_to_dict(note)
        item["practice_name"] = practice_name
        item["session_start_time"] = start_time
        history.append(item)
    return history


def player_attendance(s: Session, player_id: int) -> dict[str, Any] | None:
    if s.get(Player, player_id) is None:
        return None

    rows = s.execute(
        select(Attendance, PracticeSession.start_time, PracticeSession.practice_name, Practice.date)
        .join(PracticeSession, PracticeSession.id == Attendance.session_id)
        .outerjoin(Practice, Practice.id == PracticeSession.practice_id)
        .where(Attendance.player_id == player_id)
        .order_by(PracticeSession.start_time.desc())
    ).all()
    history = [
        {
            "session_id": mark.session_id,
            "status": mark.status,
            "notes": mark.notes,
            "practice_name": practice_name,
            "practice_date": practice_date,
            "session_start_time": start_time,
        }
        for mark, start_time, practice_name, practice_date in rows
    ]

    total = s.execute(select(func.count()).select_from(PracticeSession)).scalar_one()
    attended = sum(1 for h in history if h["status"] in ATTENDED_STATUSES)
    missed = sum(1 for h in history if h["status"] == "absent")
    rate = round(attended / total * 100) if total else 0
    return {
        "history": history,
        "stats": {
            "total_practices": total,
            "practices_attended": attended,
            "practices_missed": missed,
            "attendance_rate": f"{rate}%",
        },
    }
