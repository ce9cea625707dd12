from __future__ import annotations

import datetime as dt
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

SESSION_ACTIVE = "active"
SESSION_COMPLETED = "completed"


def utcnow() -> dt.datetime:
    """Naive UTC timestamp, matching how SQLite hands datetimes back."""
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class Team(Base):
    __tablename__ = "teams"
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(120))
    season: Mapped[str] = mapped_column(String(40))
    division: Mapped[str] = mapped_column(String(40))
    coach: Mapped[str] = mapped_column(String(120))
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)


class Player(Base):
    __tablename__ = "players"
    id: Mapped[int] = mapped_column(primary_key=True)
    first_name: Mapped[str] = mapped_column(String(80))
    last_name: Mapped[str] = mapped_column(String(80))
    jersey_number: Mapped[int] = mapped_column(Integer)
    position: Mapped[str] = mapped_column(String(40))
    skill_level: Mapped[int] = mapped_column(Integer)
    height: Mapped[str | None] = mapped_column(String(20))
    year: Mapped[str | None] = mapped_column(String(20))
    # Stat counters stay NULL until recorded; readers report NULL as 0.
    kills: Mapped[int | None] = mapped_column(Integer)
    blocks: Mapped[int | None] = mapped_column(Integer)
    aces: Mapped[int | None] = mapped_column(Integer)
    digs: Mapped[int | None] = mapped_column(Integer)
    assists: Mapped[int | None] = mapped_column(Integer)
    team_id: Mapped[int | None] = mapped_column(ForeignKey("teams.id", ondelete="CASCADE"), index=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)
    __table_args__ = (CheckConstraint("skill_level between 1 and 5", name="ck_players_skill_level"),)


class Drill(Base):
    __tablename__ = "drills"
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(120))
    category: Mapped[str] = mapped_column(String(60), index=True)
    duration: Mapped[int] = mapped_column(Integer)
    difficulty: Mapped[int] = mapped_column(Integer)
    description: Mapped[str | None] = mapped_column(Text)
    equipment: Mapped[list[str] | None] = mapped_column(JSON)
    min_players: Mapped[int] = mapped_column(Integer)
    max_players: Mapped[int] = mapped_column(Integer)
    focus: Mapped[list[str] | None] = mapped_column(JSON)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)
    __table_args__ = (CheckConstraint("difficulty between 1 and 5", name="ck_drills_difficulty"),)


class Practice(Base):
    __tablename__ = "practices"
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(120))
    date: Mapped[dt.date | None] = mapped_column(Date, index=True)
    duration: Mapped[int] = mapped_column(Integer)
    phases: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON)
    team_id: Mapped[int | None] = mapped_column(ForeignKey("teams.id", ondelete="CASCADE"), index=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)


class Video(Base):
    __tablename__ = "videos"
    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(160))
    category: Mapped[str] = mapped_column(String(60), index=True)
    duration: Mapped[str] = mapped_column(String(16))
    thumbnail: Mapped[str | None] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text)
    url: Mapped[str | None] = mapped_column(String(500))
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)


class PracticeSession(Base):
    __tablename__ = "practice_sessions"
    id: Mapped[int] = mapped_column(primary_key=True)
    practice_id: Mapped[int] = mapped_column(ForeignKey("practices.id", ondelete="CASCADE"), index=True)
    practice_name: Mapped[str | None] = mapped_column(String(120))
    start_time: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)
    end_time: Mapped[dt.datetime | None] = mapped_column(DateTime)
    current_phase: Mapped[int] = mapped_column(Integer, default=0)
    phase_start_time: Mapped[dt.datetime | None] = mapped_column(DateTime)
    phase_timer_seconds: Mapped[int] = mapped_column(Integer, default=0)
    total_elapsed_seconds: Mapped[int] = mapped_column(Integer, default=0)
    is_paused: Mapped[bool] = mapped_column(Boolean, default=False)
    notes: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(16), default=SESSION_ACTIVE)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)
    __table_args__ = (
        CheckConstraint("status in ('active', 'completed')", name="ck_practice_sessions_status"),
        # At most one active session.
        Index(
            "uq_practice_sessions_single_active",
            "status",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
    )


class Attendance(Base):
    __tablename__ = "practice_attendance"
    id: Mapped[int] = mapped_column(primary_key=True)
    session_id: Mapped[int] = mapped_column(ForeignKey("practice_sessions.id", ondelete="CASCADE"), index=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id", ondelete="CASCADE"), index=True)
    status: Mapped[str] = mapped_column(String(20), default="present")
    notes: Mapped[str | None] = mapped_column(Text)
    __table_args__ = (UniqueConstraint("session_id", "player_id", name="uq_attendance_session_player"),)


class PlayerNote(Base):
    __tablename__ = "player_notes"
    id: Mapped[int] = mapped_column(primary_key=True)
    session_id: Mapped[int] = mapped_column(ForeignKey("practice_sessions.id", ondelete="CASCADE"), index=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id", ondelete="CASCADE"), index=True)
    notes: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)
    __table_args__ = (UniqueConstraint("session_id", "player_id", name="uq_player_notes_session_player"),)
