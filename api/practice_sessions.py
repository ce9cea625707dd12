from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Request, Response, status

from api.observability import bind_log_context
from api.ratelimit import limiter, write_limit
from api.schemas import (
    AttendanceOut,
    ChangesOut,
    PracticeSessionCreate,
    PracticeSessionDetailOut,
    PracticeSessionOut,
    PracticeSessionUpdate,
    SessionClockOut,
)
from core.db import session_scope
from core.models import Practice, utcnow
from core.services import practice_sessions as sessions
from core.services.practice_timer import resume_clock

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/practice-sessions", tags=["practice-sessions"])


@router.get("", response_model=list[PracticeSessionOut])
def list_practice_sessions():
    with session_scope() as s:
        return [PracticeSessionOut.model_validate(r) for r in sessions.list_sessions(s)]


# Declared before "/{session_id}" so "active" is not parsed as an id.
@router.get("/active", response_model=Optional[PracticeSessionOut])
def get_active_practice_session():
    with session_scope() as s:
        row = sessions.get_active_session(s)
        return PracticeSessionOut.model_validate(row) if row else None


@router.get("/{session_id}", response_model=PracticeSessionDetailOut)
def get_practice_session(session_id: int):
    bind_log_context(session_id=session_id)
    with session_scope() as s:
        row = sessions.get_session(s, session_id)
        if row is None:
            raise HTTPException(status_code=404, detail="Practice session not found")
        out = PracticeSessionDetailOut.model_validate(row)
        out.attendance = [AttendanceOut.model_validate(a) for a in sessions.session_attendance(s, session_id)]
        return out


@router.get("/{session_id}/clock", response_model=SessionClockOut)
def get_practice_session_clock(session_id: int):
    bind_log_context(session_id=session_id)
    with session_scope() as s:
        row = sessions.get_session(s, session_id)
        if row is None:
            raise HTTPException(status_code=404, detail="Practice session not found")
        practice = s.get(Practice, row.practice_id)
        clock = resume_clock(row, practice.phases if practice else None, utcnow())
    return SessionClockOut(
        session_id=clock.session_id,
        current_phase=clock.current_phase,
        phase_name=clock.phase_name,
        phase_remaining_seconds=clock.phase_remaining_seconds,
        total_elapsed_seconds=clock.total_elapsed_seconds,
        is_paused=clock.is_paused,
        phase_display=clock.phase_display,
        phase_finished=clock.phase_finished,
    )


@router.post("", response_model=PracticeSessionOut, status_code=status.HTTP_201_CREATED)
@limiter.limit(write_limit)
def create_practice_session(request: Request, response: Response, body: PracticeSessionCreate):
    del request, response
    bind_log_context(practice_id=body.practice_id)
    try:
        with session_scope() as s:
            row = sessions.create_session(
                s,
                practice_id=body.practice_id,
                practice_name=body.practice_name,
                start_time=body.start_time,
                notes=body.notes,
            )
            return PracticeSessionOut.model_validate(row)
    except sessions.PracticeNotFound:
        raise HTTPException(status_code=404, detail="Practice not found")
    except sessions.ActiveSessionConflict as exc:
        logger.warning("practice_session_conflict", extra={"active_session_id": exc.active_session_id})
        raise HTTPException(
            status_code=409,
            detail={
                "code": "SESSION_ALREADY_ACTIVE",
                "message": str(exc),
                "active_session_id": exc.active_session_id,
            },
        )


@router.put("/{session_id}", response_model=ChangesOut)
@limiter.limit(write_limit)
def update_practice_session(request: Request, response: Response, session_id: int, body: PracticeSessionUpdate):
    del request, response
    bind_log_context(session_id=session_id)
    with session_scope() as s:
        changes = sessions.update_session(s, session_id, body.model_dump(exclude_unset=True))
    if not changes:
        logger.info("practice_session_snapshot_dropped")
    return ChangesOut(changes=changes)


@router.delete("/{session_id}", response_model=ChangesOut)
@limiter.limit(write_limit)
def complete_practice_session(request: Request, response: Response, session_id: int):
    del request, response
    bind_log_context(session_id=session_id)
    with session_scope() as s:
        changes = sessions.complete_session(s, session_id)
    return ChangesOut(changes=changes)
