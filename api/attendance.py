from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException, Request, Response
from pydantic import ValidationError

from api.observability import bind_log_context
from api.ratelimit import limiter, write_limit
from api.schemas import AttendanceBatchOut, AttendanceRecordIn, PlayerNoteIn, PlayerNoteOut, PlayerNoteSaved
from core.config import get_settings
from core.db import session_scope
from core.services import attendance as attendance_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["attendance"])


def _parse_records(payload: Any) -> list[AttendanceRecordIn]:
    if not isinstance(payload, list):
        raise HTTPException(status_code=400, detail="Attendance records must be an array")
    records = []
    for index, item in enumerate(payload):
        try:
            records.append(AttendanceRecordIn.model_validate(item))
        except ValidationError as exc:
            raise HTTPException(
                status_code=400,
                detail={
                    "code": "INVALID_ATTENDANCE_RECORD",
                    "message": f"Attendance record {index} is invalid",
                    "errors": exc.errors(include_url=False, include_context=False),
                },
            )
    return records


@router.post("/practice-attendance", response_model=AttendanceBatchOut, response_model_by_alias=True)
@limiter.limit(write_limit)
def save_attendance(request: Request, response: Response, payload: Any = Body(...)):
    del request, response
    records = _parse_records(payload)
    session_ids = {r.session_id for r in records}
    if len(session_ids) == 1:
        bind_log_context(session_id=session_ids.pop())
    atomic = get_settings().attendance_atomic_batches
    with session_scope() as s:
        ids = attendance_service.upsert_attendance(s, [r.model_dump() for r in records], atomic=atomic)
    return AttendanceBatchOut(inserted_ids=ids)


@router.get("/player-notes/{session_id}/{player_id}", response_model=PlayerNoteOut)
def get_player_note(session_id: int, player_id: int):
    bind_log_context(session_id=session_id, player_id=player_id)
    with session_scope() as s:
        return PlayerNoteOut(**attendance_service.get_player_note(s, session_id, player_id))


@router.post("/player-notes", response_model=PlayerNoteSaved)
@limiter.limit(write_limit)
def save_player_note(request: Request, response: Response, body: PlayerNoteIn):
    del request, response
    bind_log_context(session_id=body.session_id, player_id=body.player_id)
    with session_scope() as s:
        note_id = attendance_service.upsert_player_note(s, body.session_id, body.player_id, body.notes)
    return PlayerNoteSaved(id=note_id)
