from __future__ import annotations

from datetime import date as dt_date
from datetime import datetime as dt_datetime
from datetime import timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _to_naive_utc(value: Optional[dt_datetime]) -> Optional[dt_datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# ── Resources ────────────────────────────────────────────────────────────


class TeamOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    season: str
    division: str
    coach: str
    created_at: Optional[dt_datetime] = None


class PlayerStats(BaseModel):
    kills: int = 0
    blocks: int = 0
    aces: int = 0
    digs: int = 0
    assists: int = 0


class PlayerOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    jersey_number: int
    position: str
    skill_level: int
    height: Optional[str] = None
    year: Optional[str] = None
    team_id: Optional[int] = None
    team_name: Optional[str] = None
    stats: PlayerStats = Field(default_factory=PlayerStats)


class DrillOut(BaseModel):
    id: int
    name: str
    category: str
    duration: int
    difficulty: int
    description: Optional[str] = None
    equipment: list[str] = Field(default_factory=list)
    min_players: int
    max_players: int
    focus: list[str] = Field(default_factory=list)


class PracticePhase(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[int] = None
    name: str
    duration: int
    type: Optional[str] = None
    drills: list[int] = Field(default_factory=list)


class DrillIn(BaseModel):
    """Body for POST /api/drills and PUT /api/drills/{id}; PUT replaces every column."""

    name: str = Field(min_length=1, max_length=120)
    category: str = Field(min_length=1, max_length=60)
    duration: int = Field(ge=1)
    difficulty: int = Field(ge=1, le=5)
    description: Optional[str] = None
    equipment: list[str] = Field(default_factory=list)
    min_players: int = Field(ge=1)
    max_players: int = Field(ge=1)
    focus: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_player_range(self) -> "DrillIn":
        if self.max_players < self.min_players:
            raise ValueError("max_players must be at least min_players")
        return self


class PracticeIn(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    date: Optional[dt_date] = None
    duration: int = Field(ge=1)
    team_id: Optional[int] = None
    phases: list[PracticePhase] = Field(default_factory=list)


class PracticeOut(BaseModel):
    id: int
    name: str
    date: Optional[dt_date] = None
    duration: int
    team_id: Optional[int] = None
    team_name: Optional[str] = None
    phases: list[PracticePhase] = Field(default_factory=list)
    created_at: Optional[dt_datetime] = None


class VideoOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    category: str
    duration: str
    thumbnail: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None


class TeamStatsOut(BaseModel):
    total_players: int
    average_skill_level: float
    total_practices: int
    average_attendance: float
    position_breakdown: dict[str, int]


class QueryStatsOut(BaseModel):
    total: int
    slow: int
    p50_ms: float
    p95_ms: float


class HealthOut(BaseModel):
    status: str
    database: str
    queries: QueryStatsOut


# ── Practice sessions ────────────────────────────────────────────────────


class PracticeSessionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    practice_id: int
    practice_name: Optional[str] = None
    start_time: dt_datetime
    end_time: Optional[dt_datetime] = None
    current_phase: int = 0
    phase_start_time: Optional[dt_datetime] = None
    phase_timer_seconds: int = 0
    total_elapsed_seconds: int = 0
    is_paused: bool = False
    notes: Optional[str] = None
    status: str
    created_at: Optional[dt_datetime] = None
    updated_at: Optional[dt_datetime] = None


class PracticeSessionCreate(BaseModel):
    # Unknown keys (including a caller-supplied status) are ignored.
    model_config = ConfigDict(extra="ignore")

    practice_id: int
    practice_name: Optional[str] = None
    start_time: Optional[dt_datetime] = None
    notes: Optional[str] = None

    @field_validator("start_time")
    @classmethod
    def _normalize_start_time(cls, value: Optional[dt_datetime]) -> Optional[dt_datetime]:
        return _to_naive_utc(value)


class PracticeSessionUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    current_phase: Optional[int] = None
    phase_start_time: Optional[dt_datetime] = None
    phase_timer_seconds: Optional[int] = None
    total_elapsed_seconds: Optional[int] = None
    is_paused: Optional[bool] = None
    notes: Optional[str] = None

    @field_validator("phase_start_time")
    @classmethod
    def _normalize_phase_start_time(cls, value: Optional[dt_datetime]) -> Optional[dt_datetime]:
        return _to_naive_utc(value)


class ChangesOut(BaseModel):
    success: bool = True
    changes: int


class AttendanceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    session_id: int
    player_id: int
    status: str
    notes: Optional[str] = None


class PracticeSessionDetailOut(PracticeSessionOut):
    attendance: list[AttendanceOut] = Field(default_factory=list)


class SessionClockOut(BaseModel):
    session_id: int
    current_phase: int
    phase_name: Optional[str] = None
    phase_remaining_seconds: int
    total_elapsed_seconds: int
    is_paused: bool
    phase_display: str
    phase_finished: bool = False


# ── Attendance & notes ───────────────────────────────────────────────────


class AttendanceRecordIn(BaseModel):
    session_id: int
    player_id: int
    status: str = Field(default="present", min_length=1, max_length=20)
    notes: Optional[str] = None


class AttendanceBatchOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    inserted_ids: list[int] = Field(alias="insertedIds")


class PlayerNoteIn(BaseModel):
    session_id: int
    player_id: int
    notes: str = ""


class PlayerNoteSaved(BaseModel):
    success: bool = True
    id: int


class PlayerNoteOut(BaseModel):
    id: Optional[int] = None
    session_id: int
    player_id: int
    notes: str = ""
    created_at: Optional[dt_datetime] = None
    updated_at: Optional[dt_datetime] = None


class PlayerNoteHistoryItem(PlayerNoteOut):
    practice_name: Optional[str] = None
    session_start_time: Optional[dt_datetime] = None


class AttendanceHistoryItem(BaseModel):
    session_id: int
    status: str
    notes: Optional[str] = None
    practice_name: Optional[str] = None
    practice_date: Optional[dt_date] = None
    session_start_time: Optional[dt_datetime] = None


class AttendanceSummary(BaseModel):
    total_practices: int
    practices_attended: int
    practices_missed: int
    attendance_rate: str


class PlayerAttendanceOut(BaseModel):
    history: list[AttendanceHistoryItem]
    stats: AttendanceSummary
