"""Practice countdown timer.

``PracticeTimer`` is the reference model of the browser countdown in
``web/static/js/timer.js``: a once-per-second tick that only decrements while
``running`` is set, so pausing gates the countdown instead of cancelling the
schedule. The server never ticks it; the test suite pins the browser timer's
rules against it.

``resume_clock`` and ``elapsed_since_save`` are the server side: they rebuild
the countdown for a stored session from its last saved snapshot.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Callable, Optional

from core.models import SESSION_ACTIVE
from core.services.catalog import decode_list

DEFAULT_DURATION_SECONDS = 45 * 60


def format_clock(seconds: int) -> str:
    """Render seconds as MM:SS (minutes are not wrapped at 60)."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


@dataclass
class PracticeTimer:
    remaining_seconds: int = DEFAULT_DURATION_SECONDS
    running: bool = False
    scheduled: bool = False
    elapsed_seconds: int = 0
    on_complete: Optional[Callable[["PracticeTimer"], None]] = None

    def start(self, duration_seconds: int = DEFAULT_DURATION_SECONDS) -> None:
        self.remaining_seconds = max(0, int(duration_seconds))
        self.running = True
        self.scheduled = True

    def toggle_pause(self) -> bool:
        self.running = not self.running
        return self.running

    def stop(self) -> None:
        self.running = False
        self.scheduled = False

    def tick(self) -> bool:
        """Advance one second. Returns True on the tick that reaches zero."""
        if not (self.scheduled and self.running and self.remaining_seconds > 0):
            return False
        self.remaining_seconds -= 1
        self.elapsed_seconds += 1
        if self.remaining_seconds == 0:
            self.stop()
            if self.on_complete is not None:
                self.on_complete(self)
            return True
        return False

    @property
    def display(self) -> str:
        return format_clock(self.remaining_seconds)


@dataclass
class SessionClock:
    session_id: int
    current_phase: int
    phase_name: Optional[str]
    phase_remaining_seconds: int
    total_elapsed_seconds: int
    is_paused: bool
    phase_finished: bool = False

    @property
    def phase_display(self) -> str:
        return format_clock(self.phase_remaining_seconds)


def elapsed_since_save(session: Any, now: dt.datetime) -> int:
    """Whole seconds the clock ran since ``updated_at``; 0 when paused or completed."""
    ticking = session.status == SESSION_ACTIVE and not session.is_paused
    if not ticking or session.updated_at is None:
        return 0
    return max(0, int((now - session.updated_at).total_seconds()))


def resume_clock(session: Any, phases: Any, now: dt.datetime) -> SessionClock:
    """Project a saved session snapshot forward to ``now``.

    ``phase_timer_seconds`` is the countdown remainder at the last save and
    ``updated_at`` the save time.
    """
    phase_list = decode_list(phases)
    index = session.current_phase or 0
    phase_name = None
    if 0 <= index < len(phase_list):
        phase_name = phase_list[index].get("name")

    remaining = int(session.phase_timer_seconds or 0)
    drift = elapsed_since_save(session, now)
    remaining -= min(drift, remaining)
    total = int(session.total_elapsed_seconds or 0) + drift
    # A never-saved countdown of 0 means the phase has not started yet.
    saved = bool(session.phase_timer_seconds) or bool(session.total_elapsed_seconds)

    return SessionClock(
        session_id=session.id,
        current_phase=index,
        phase_name=phase_name,
        phase_remaining_seconds=remaining,
        total_elapsed_seconds=total,
        is_paused=bool(session.is_paused),
        phase_finished=saved and remaining == 0,
    )
