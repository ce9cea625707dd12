from __future__ import annotations

import datetime as dt
from types import SimpleNamespace

from core.services.practice_timer import DEFAULT_DURATION_SECONDS, PracticeTimer, format_clock, resume_clock

PHASES = [
    {"id": 1, "name": "Dynamic Warm-up", "duration": 15, "type": "warmup", "drills": [1]},
    {"id": 2, "name": "Skill Development", "duration": 45, "type": "skill", "drills": [2, 4]},
]
SAVED_AT = dt.datetime(2025, 10, 8, 16, 0, 0)


def _session(**overrides):
    fields = dict(
        id=7,
        current_phase=1,
        phase_timer_seconds=300,
        total_elapsed_seconds=1200,
        is_paused=False,
        status="active",
        updated_at=SAVED_AT,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_format_clock():
    assert format_clock(0) == "00:00"
    assert format_clock(59) == "00:59"
    assert format_clock(DEFAULT_DURATION_SECONDS) == "45:00"
    assert format_clock(3725) == "62:05"
    assert format_clock(-3) == "00:00"


def test_tick_only_counts_down_while_running():
    timer = PracticeTimer()
    assert timer.tick() is False
    assert timer.remaining_seconds == DEFAULT_DURATION_SECONDS

    timer.start(10)
    timer.tick()
    assert timer.remaining_seconds == 9

    assert timer.toggle_pause() is False
    timer.tick()
    timer.tick()
    assert timer.remaining_seconds == 9
    assert timer.scheduled is True

    assert timer.toggle_pause() is True
    timer.tick()
    assert timer.display == "00:08"


def test_completion_fires_once_at_zero():
    fired = []
    timer = PracticeTimer(on_complete=fired.append)
    timer.start(2)
    assert timer.tick() is False
    assert timer.tick() is True
    assert fired == [timer]
    assert timer.running is False
    assert timer.scheduled is False

    assert timer.tick() is False
    assert len(fired) == 1


def test_stop_cancels_countdown():
    timer = PracticeTimer()
    timer.start(30)
    timer.stop()
    timer.tick()
    assert timer.remaining_seconds == 30


def test_resume_clock_advances_running_session():
    clock = resume_clock(_session(), PHASES, SAVED_AT + dt.timedelta(seconds=90))
    assert clock.phase_name == "Skill Development"
    assert clock.phase_remaining_seconds == 210
    assert clock.total_elapsed_seconds == 1290
    assert clock.phase_display == "03:30"


def test_resume_clock_bottoms_out_at_zero():
    clock = resume_clock(_session(), PHASES, SAVED_AT + dt.timedelta(hours=2))
    assert clock.phase_remaining_seconds == 0
    assert clock.total_elapsed_seconds == 1200 + 7200


def test_resume_clock_holds_paused_and_completed_sessions():
    later = SAVED_AT + dt.timedelta(minutes=10)
    for session in (_session(is_paused=True), _session(status="completed")):
        clock = resume_clock(session, PHASES, later)
        assert clock.phase_remaining_seconds == 300
        assert clock.total_elapsed_seconds == 1200


def test_resume_clock_with_phase_past_the_plan():
    clock = resume_clock(_session(current_phase=5), PHASES, SAVED_AT)
    assert clock.phase_name is None
    assert resume_clock(_session(current_phase=0), None, SAVED_AT).phase_name is None


def test_elapsed_counts_only_running_ticks():
    timer = PracticeTimer()
    timer.start(5)
    timer.tick()
    timer.toggle_pause()
    timer.tick()
    timer.toggle_pause()
    timer.tick()
    assert timer.elapsed_seconds == 2

    timer.start(3)
    timer.tick()
    assert timer.elapsed_seconds == 3


def test_resume_clock_flags_phase_that_ran_out():
    finished = resume_clock(_session(), PHASES, SAVED_AT + dt.timedelta(minutes=6))
    assert finished.phase_remaining_seconds == 0
    assert finished.phase_finished is True

    assert resume_clock(_session(), PHASES, SAVED_AT + dt.timedelta(minutes=4)).phase_finished is False


def test_unsaved_countdown_is_not_a_finished_phase():
    fresh = _session(current_phase=0, phase_timer_seconds=0, total_elapsed_seconds=0, is_paused=True)
    clock = resume_clock(fresh, PHASES, SAVED_AT + dt.timedelta(minutes=30))
    assert clock.phase_remaining_seconds == 0
    assert clock.phase_finished is False
