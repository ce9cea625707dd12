from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from core.db import session_scope
from core.models import SESSION_ACTIVE, SESSION_COMPLETED, PracticeSession
from core.services import practice_sessions as sessions


def test_create_copies_practice_name_and_forces_active(seeded_db):
    with session_scope() as s:
        row = sessions.create_session(s, practice_id=1)
        assert row.status == SESSION_ACTIVE
        assert row.practice_name == "Championship Prep"
        assert row.phase_start_time == row.start_time
        assert row.current_phase == 0
        assert row.is_paused is False


def test_create_keeps_explicit_practice_name(seeded_db):
    with session_scope() as s:
        row = sessions.create_session(s, practice_id=1, practice_name="Tuesday scrimmage")
        assert row.practice_name == "Tuesday scrimmage"


def test_create_for_missing_practice_raises(seeded_db):
    with pytest.raises(sessions.PracticeNotFound):
        with session_scope() as s:
            sessions.create_session(s, practice_id=404)


def test_create_while_active_raises_conflict(seeded_db):
    with session_scope() as s:
        first = sessions.create_session(s, practice_id=1)
        first_id = first.id

    with pytest.raises(sessions.ActiveSessionConflict) as excinfo:
        with session_scope() as s:
            sessions.create_session(s, practice_id=1)
    assert excinfo.value.active_session_id == first_id


def test_storage_rejects_two_active_rows(seeded_db):
    with session_scope() as s:
        s.add(PracticeSession(practice_id=1, practice_name="a", status=SESSION_ACTIVE))
    with pytest.raises(IntegrityError):
        with session_scope() as s:
            s.add(PracticeSession(practice_id=1, practice_name="b", status=SESSION_ACTIVE))


def test_completed_rows_do_not_block_new_session(seeded_db):
    with session_scope() as s:
        s.add(PracticeSession(practice_id=1, practice_name="old", status=SESSION_COMPLETED))
        s.add(PracticeSession(practice_id=1, practice_name="older", status=SESSION_COMPLETED))
    with session_scope() as s:
        row = sessions.create_session(s, practice_id=1)
        assert sessions.get_active_session(s).id == row.id


def test_update_only_touches_timer_fields(seeded_db):
    with session_scope() as s:
        session_id = sessions.create_session(s, practice_id=1, notes="keep").id

    with session_scope() as s:
        changes = sessions.update_session(
            s, session_id, {"phase_timer_seconds": 120, "status": "completed", "practice_id": 99}
        )
        assert changes == 1

    with session_scope() as s:
        row = sessions.get_session(s, session_id)
        assert row.phase_timer_seconds == 120
        assert row.status == SESSION_ACTIVE
        assert row.practice_id == 1
        assert row.notes == "keep"
        assert row.updated_at >= row.created_at


def test_update_unknown_id_changes_nothing(seeded_db):
    with session_scope() as s:
        assert sessions.update_session(s, 12345, {"current_phase": 3}) == 0


def test_complete_is_idempotent(seeded_db):
    with session_scope() as s:
        session_id = sessions.create_session(s, practice_id=1).id

    with session_scope() as s:
        assert sessions.complete_session(s, session_id) == 1
    with session_scope() as s:
        first_end = sessions.get_session(s, session_id).end_time
    with session_scope() as s:
        assert sessions.complete_session(s, session_id) == 0
    with session_scope() as s:
        row = sessions.get_session(s, session_id)
        assert row.status == SESSION_COMPLETED
        assert row.end_time == first_end
        assert sessions.get_active_session(s) is None


def test_list_sessions_newest_first(seeded_db):
    import datetime as dt

    with session_scope() as s:
        s.add(PracticeSession(practice_id=1, status=SESSION_COMPLETED, start_time=dt.datetime(2025, 9, 1, 16, 0)))
        s.add(PracticeSession(practice_id=1, status=SESSION_COMPLETED, start_time=dt.datetime(2025, 10, 1, 16, 0)))
    with session_scope() as s:
        starts = [r.start_time.month for r in sessions.list_sessions(s)]
    assert starts == [10, 9]


def test_update_ignores_null_for_required_columns(seeded_db):
    with session_scope() as s:
        session_id = sessions.create_session(s, practice_id=1, notes="drop me").id

    with session_scope() as s:
        sessions.update_session(s, session_id, {"is_paused": None, "current_phase": None, "notes": None})

    with session_scope() as s:
        row = sessions.get_session(s, session_id)
        assert row.is_paused is False
        assert row.current_phase == 0
        assert row.notes is None


def _rewind_save(session_id: int, saved_at, phase_seconds: int, total_seconds: int = 0) -> None:
    with session_scope() as s:
        row = sessions.get_session(s, session_id)
        row.phase_timer_seconds = phase_seconds
        row.total_elapsed_seconds = total_seconds
        row.updated_at = saved_at


def test_notes_only_update_banks_running_clock(seeded_db):
    import datetime as dt

    from core.models import Practice
    from core.services.practice_timer import resume_clock

    saved_at = dt.datetime(2025, 10, 1, 16, 0, 0)
    now = saved_at + dt.timedelta(seconds=90)
    with session_scope() as s:
        session_id = sessions.create_session(s, practice_id=1).id
    _rewind_save(session_id, saved_at, phase_seconds=600, total_seconds=30)

    with session_scope() as s:
        assert sessions.update_session(s, session_id, {"notes": "serve receive shaky"}, now=now) == 1

    with session_scope() as s:
        row = sessions.get_session(s, session_id)
        assert row.phase_timer_seconds == 510
        assert row.total_elapsed_seconds == 120
        assert row.updated_at == now
        clock = resume_clock(row, s.get(Practice, 1).phases, now + dt.timedelta(seconds=10))
    assert clock.phase_remaining_seconds == 500
    assert clock.total_elapsed_seconds == 130


def test_reload_after_update_keeps_elapsed_time(seeded_db):
    import datetime as dt

    from core.models import Practice, utcnow
    from core.services.practice_timer import resume_clock

    with session_scope() as s:
        session_id = sessions.create_session(s, practice_id=1).id
    _rewind_save(session_id, utcnow() - dt.timedelta(minutes=5), phase_seconds=600)

    with session_scope() as s:
        sessions.update_session(s, session_id, {"notes": "water break"})

    with session_scope() as s:
        row = sessions.get_session(s, session_id)
        clock = resume_clock(row, s.get(Practice, 1).phases, utcnow())
    assert clock.phase_remaining_seconds < 600
    assert clock.total_elapsed_seconds > 0


def test_explicit_clock_values_win_over_banking(seeded_db):
    import datetime as dt

    saved_at = dt.datetime(2025, 10, 1, 16, 0, 0)
    with session_scope() as s:
        session_id = sessions.create_session(s, practice_id=1).id
    _rewind_save(session_id, saved_at, phase_seconds=600)

    with session_scope() as s:
        sessions.update_session(
            s,
            session_id,
            {"current_phase": 1, "phase_timer_seconds": 900, "total_elapsed_seconds": 600},
            now=saved_at + dt.timedelta(seconds=45),
        )

    with session_scope() as s:
        row = sessions.get_session(s, session_id)
        assert (row.current_phase, row.phase_timer_seconds, row.total_elapsed_seconds) == (1, 900, 600)


def test_paused_session_does_not_bank_drift(seeded_db):
    import datetime as dt

    saved_at = dt.datetime(2025, 10, 1, 16, 0, 0)
    with session_scope() as s:
        session_id = sessions.create_session(s, practice_id=1).id
    _rewind_save(session_id, saved_at, phase_seconds=600, total_seconds=200)
    with session_scope() as s:
        sessions.get_session(s, session_id).is_paused = True

    with session_scope() as s:
        sessions.update_session(s, session_id, {"notes": "timeout"}, now=saved_at + dt.timedelta(minutes=10))

    with session_scope() as s:
        row = sessions.get_session(s, session_id)
        assert (row.phase_timer_seconds, row.total_elapsed_seconds) == (600, 200)


def test_complete_banks_elapsed_time(seeded_db):
    import datetime as dt

    saved_at = dt.datetime(2025, 10, 1, 16, 0, 0)
    with session_scope() as s:
        session_id = sessions.create_session(s, practice_id=1).id
    _rewind_save(session_id, saved_at, phase_seconds=60, total_seconds=1000)

    with session_scope() as s:
        assert sessions.complete_session(s, session_id, now=saved_at + dt.timedelta(seconds=75)) == 1

    with session_scope() as s:
        row = sessions.get_session(s, session_id)
        assert row.status == SESSION_COMPLETED
        assert row.phase_timer_seconds == 0
        assert row.total_elapsed_seconds == 1075
