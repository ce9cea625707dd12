from __future__ import annotations

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from core.db import session_scope
from core.models import Attendance, PlayerNote
from core.services import attendance
from core.services.practice_sessions import create_session


@pytest.fixture
def session_id(seeded_db):
    with session_scope() as s:
        return create_session(s, practice_id=1).id


def _marks(session_id):
    with session_scope() as s:
        rows = s.execute(select(Attendance).where(Attendance.session_id == session_id).order_by(Attendance.player_id)).scalars()
        return [(r.player_id, r.status) for r in rows]


def test_upsert_returns_ids_in_input_order(session_id):
    with session_scope() as s:
        ids = attendance.upsert_attendance(
            s,
            [
                {"session_id": session_id, "player_id": 3},
                {"session_id": session_id, "player_id": 1, "status": "late"},
            ],
        )
    assert len(ids) == 2
    assert _marks(session_id) == [(1, "late"), (3, "present")]

    with session_scope() as s:
        again = attendance.upsert_attendance(s, [{"session_id": session_id, "player_id": 1, "status": "excused"}])
    assert again == [ids[1]]
    assert _marks(session_id) == [(1, "excused"), (3, "present")]


def test_atomic_batch_discards_everything_on_failure(session_id):
    with pytest.raises(IntegrityError):
        with session_scope() as s:
            attendance.upsert_attendance(
                s,
                [{"session_id": session_id, "player_id": 1}, {"session_id": session_id, "player_id": 999}],
            )
    assert _marks(session_id) == []


def test_best_effort_batch_keeps_earlier_records(session_id):
    with pytest.raises(IntegrityError):
        with session_scope() as s:
            attendance.upsert_attendance(
                s,
                [{"session_id": session_id, "player_id": 1}, {"session_id": session_id, "player_id": 999}],
                atomic=False,
            )
    assert _marks(session_id) == [(1, "present")]


def test_player_note_upsert_keeps_created_at(session_id):
    with session_scope() as s:
        note_id = attendance.upsert_player_note(s, session_id, 2, "first")
    with session_scope() as s:
        created = s.get(PlayerNote, note_id).created_at

    with session_scope() as s:
        assert attendance.upsert_player_note(s, session_id, 2, "second") == note_id
    with session_scope() as s:
        note = s.get(PlayerNote, note_id)
        assert note.notes == "second"
        assert note.created_at == created
        assert note.updated_at >= created


def test_missing_note_reads_as_empty_placeholder(session_id):
    with session_scope() as s:
        assert attendance.get_player_note(s, session_id, 4) == {"session_id": session_id, "player_id": 4, "notes": ""}


def test_player_attendance_counts_against_all_sessions(session_id):
    with session_scope() as s:
        attendance.upsert_attendance(s, [{"session_id": session_id, "player_id": 5, "status": "absent"}])

    with session_scope() as s:
        summary = attendance.player_attendance(s, 5)
        assert attendance.player_attendance(s, 404) is None

    assert summary["stats"] == {
        "total_practices": 1,
        "practices_attended": 0,
        "practices_missed": 1,
        "attendance_rate": "0%",
    }
    assert summary["history"][0]["practice_name"] == "Championship Prep"
