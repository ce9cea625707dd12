"""Practice session lifecycle: active -> completed.

A session row is a full snapshot of the practice timer (current phase,
countdown remainder, total elapsed, paused flag) so a client that reloads can
resume from the database instead of its own in-memory clock. Only one session
may be active at a time; creation is refused while another is running.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.models import SESSION_ACTIVE, SESSION_COMPLETED, Attendance, Practice, PracticeSession, utcnow
from core.services.practice_timer import elapsed_since_save

logger = logging.getLogger(__name__)

TIMER_FIELDS = (
    "current_phase",
    "phase_start_time",
    "phase_timer_seconds",
    "total_elapsed_seconds",
    "is_paused",
    "notes",
)
# Only these timer columns may be cleared with an explicit null.
NULLABLE_TIMER_FIELDS = ("phase_start_time", "notes")


class PracticeNotFound(LookupError):
    pass


class ActiveSessionConflict(RuntimeError):
    def __init__(self, active_session_id: int):
        super().__init__(f"Practice session {active_session_id} is already active")
        self.active_session_id = active_session_id


def get_active_session(s: Session) -> PracticeSession | None:
    return s.execute(
        select(PracticeSession)
        .where(PracticeSession.status == SESSION_ACTIVE)
        .order_by(PracticeSession.created_at.desc(), PracticeSession.id.desc())
        .limit(1)
    ).scalar_one_or_none()


def get_session(s: Session, session_id: int) -> PracticeSession | None:
    return s.get(PracticeSession, session_id)


def list_sessions(s: Session) -> list[PracticeSession]:
    return list(
        s.execute(
            select(PracticeSession).order_by(PracticeSession.start_time.desc(), PracticeSession.id.desc())
        ).scalars().all()
    )


def session_attendance(s: Session, session_id: int) -> list[Attendance]:
    return list(
        s.execute(
            select(Attendance).where(Attendance.session_id == session_id).order_by(Attendance.player_id)
        ).scalars().all()
    )


def create_session(
    s: Session,
    practice_id: int,
    practice_name: str | None = None,
    start_time=None,
    notes: str | None = None,
) -> PracticeSession:
    practice = s.get(Practice, practice_id)
    if practice is None:
        raise PracticeNotFound(practice_id)

    active = get_active_session(s)
    if active is not None:
        raise ActiveSessionConflict(active.id)

    now = utcnow()
    row = PracticeSession(
        practice_id=practice_id,
        practice_name=practice_name or practice.name,
        start_time=start_time or now,
        phase_start_time=start_time or now,
        notes=notes,
        status=SESSION_ACTIVE,
        created_at=now,
        updated_at=now,
    )
    s.add(row)
    try:
        s.flush()
    except IntegrityError:
        # Lost a race with a concurrent create; the partial unique index caught it.
        s.rollback()
        active = get_active_session(s)
        if active is None:
            raise
        raise ActiveSessionConflict(active.id)
    s.refresh(row)
    logger.info(
        "practice_session_created",
        extra={"session_id": row.id, "practice_id": row.practice_id},
    )
    return row


def _banked_clock(row: PracticeSession, now: dt.datetime) -> dict[str, int]:
    """Countdown and total as of ``now``, so moving ``updated_at`` loses no time."""
    drift = elapsed_since_save(row, now)
    return {
        "phase_timer_seconds": max(0, (row.phase_timer_seconds or 0) - drift),
        "total_elapsed_seconds": (row.total_elapsed_seconds or 0) + drift,
    }


def update_session(
    s: Session,
    session_id: int,
    fields: dict[str, Any],
    now: dt.datetime | None = None,
) -> int:
    """Overwrite the given timer columns. Returns the number of rows changed.

    Clock columns the caller leaves out are advanced by the time that ran
    since the previous save before ``updated_at`` moves to ``now``.
    """
    row = s.get(PracticeSession, session_id)
    if row is None:
        logger.debug("practice_session_update_missed", extra={"session_id": session_id})
        return 0

    now = now or utcnow()
    values = {
        k: v
        for k, v in fields.items()
        if k in TIMER_FIELDS and (v is not None or k in NULLABLE_TIMER_FIELDS)
    }
    for key, banked in _banked_clock(row, now).items():
        values.setdefault(key, banked)
    values["updated_at"] = now

    for key, value in values.items():
        setattr(row, key, value)
    s.flush()
    logger.debug(
        "practice_session_updated",
        extra={"session_id": session_id, "fields": sorted(values)},
    )
    return 1


def complete_session(s: Session, session_id: int, now: dt.datetime | None = None) -> int:
    """Mark an active session completed. Completed sessions are left alone (0 changes)."""
    row = s.get(PracticeSession, session_id)
    if row is None or row.status != SESSION_ACTIVE:
        logger.info("practice_session_completed", extra={"session_id": session_id, "changes": 0})
        return 0

    now = now or utcnow()
    result = s.execute(
        update(PracticeSession)
        .where(PracticeSession.id == session_id, PracticeSession.status == SESSION_ACTIVE)
        .values(status=SESSION_COMPLETED, end_time=now, updated_at=now, **_banked_clock(row, now))
    )
    changes = result.rowcount or 0
    logger.info("practice_session_completed", extra={"session_id": session_id, "changes": changes})
    return changes
