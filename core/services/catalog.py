"""Queries for teams, players, drills, practices and videos, plus drill and
practice writes.

Rows are returned as plain dicts shaped for the API: JSON text columns are
decoded into lists, player stat counters are nested under ``stats`` and the
owning team's name is denormalised in as ``team_name``.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from core.models import Attendance, Drill, Player, Practice, Team, Video

logger = logging.getLogger(__name__)

STAT_FIELDS = ("kills", "blocks", "aces", "digs", "assists")
ATTENDED_STATUSES = ("present", "late")
DRILL_FIELDS = (
    "name",
    "category",
    "duration",
    "difficulty",
    "description",
    "equipment",
    "min_players",
    "max_players",
    "focus",
)
PRACTICE_FIELDS = ("name", "date", "duration", "team_id", "phases")


class TeamNotFound(LookupError):
    pass


def decode_list(value: Any) -> list:
    """Decode a JSON list column. NULL and empty text decode to ``[]``."""
    if value is None or value == "":
        return []
    if isinstance(value, str):
        value = json.loads(value)
    return list(value)


def team_to_dict(team: Team) -> dict[str, Any]:
    return {
        "id": team.id,
        "name": team.name,
        "season": team.season,
        "division": team.division,
        "coach": team.coach,
        "created_at": team.created_at,
    }


def player_to_dict(player: Player, team_name: str | None) -> dict[str, Any]:
    return {
        "id": player.id,
        "first_name": player.first_name,
        "last_name": player.last_name,
        "jersey_number": player.jersey_number,
        "position": player.position,
        "skill_level": player.skill_level,
        "height": player.height,
        "year": player.year,
        "team_id": player.team_id,
        "team_name": team_name,
        "stats": {name: getattr(player, name) or 0 for name in STAT_FIELDS},
    }


def drill_to_dict(drill: Drill) -> dict[str, Any]:
    return {
        "id": drill.id,
        "name": drill.name,
        "category": drill.category,
        "duration": drill.duration,
        "difficulty": drill.difficulty,
        "description": drill.description,
        "equipment": decode_list(drill.equipment),
        "min_players": drill.min_players,
        "max_players": drill.max_players,
        "focus": decode_list(drill.focus),
    }


def practice_to_dict(practice: Practice, team_name: str | None) -> dict[str, Any]:
    return {
        "id": practice.id,
        "name": practice.name,
        "date": practice.date,
        "duration": practice.duration,
        "team_id": practice.team_id,
        "team_name": team_name,
        "phases": decode_list(practice.phases),
        "created_at": practice.created_at,
    }


def list_teams(s: Session) -> list[dict[str, Any]]:
    rows = s.execute(select(Team).order_by(Team.created_at.desc(), Team.id.desc())).scalars().all()
    return [team_to_dict(t) for t in rows]


def _players_query():
    return select(Player, Team.name).outerjoin(Team, Team.id == Player.team_id)


def list_players(s: Session) -> list[dict[str, Any]]:
    rows = s.execute(_players_query().order_by(Player.last_name, Player.first_name, Player.id)).all()
    return [player_to_dict(player, team_name) for player, team_name in rows]


def get_player(s: Session, player_id: int) -> dict[str, Any] | None:
    row = s.execute(_players_query().where(Player.id == player_id)).first()
    if row is None:
        return None
    player, team_name = row
    return player_to_dict(player, team_name)


def list_drills(s: Session) -> list[dict[str, Any]]:
    rows = s.execute(select(Drill).order_by(Drill.category, Drill.name)).scalars().all()
    return [drill_to_dict(d) for d in rows]


def get_drill(s: Session, drill_id: int) -> dict[str, Any] | None:
    drill = s.get(Drill, drill_id)
    return drill_to_dict(drill) if drill else None


def _practices_query():
    return select(Practice, Team.name).outerjoin(Team, Team.id == Practice.team_id)


def list_practices(s: Session) -> list[dict[str, Any]]:
    rows = s.execute(
        _practices_query().order_by(Practice.date.desc(), Practice.created_at.desc(), Practice.id.desc())
    ).all()
    return [practice_to_dict(practice, team_name) for practice, team_name in rows]


def get_practice(s: Session, practice_id: int) -> dict[str, Any] | None:
    row = s.execute(_practices_query().where(Practice.id == practice_id)).first()
    if row is None:
        return None
    practice, team_name = row
    return practice_to_dict(practice, team_name)


def list_videos(s: Session) -> list[Video]:
    return list(s.execute(select(Video).order_by(Video.category, Video.title)).scalars().all())


def team_stats(s: Session) -> dict[str, Any]:
    total_players = s.execute(select(func.count()).select_from(Player)).scalar_one()
    avg_skill = s.execute(select(func.avg(Player.skill_level))).scalar_one()
    positions = s.execute(select(Player.position, func.count()).group_by(Player.position)).all()
    total_practices = s.execute(select(func.count()).select_from(Practice)).scalar_one()
    total_marks = s.execute(select(func.count()).select_from(Attendance)).scalar_one()
    attended = s.execute(
        select(func.count()).select_from(Attendance).where(Attendance.status.in_(ATTENDED_STATUSES))
    ).scalar_one()
    return {
        "total_players": total_players,
        "average_skill_level": round(float(avg_skill or 0), 1),
        "total_practices": total_practices,
        "average_attendance": round(attended / total_marks, 2) if total_marks else 0.0,
        "position_breakdown": {position: count for position, count in positions},
    }


def _drill_values(fields: dict[str, Any]) -> dict[str, Any]:
    values = {k: fields.get(k) for k in DRILL_FIELDS}
    values["equipment"] = list(values["equipment"] or [])
    values["focus"] = list(values["focus"] or [])
    return values


def create_drill(s: Session, fields: dict[str, Any]) -> dict[str, Any]:
    drill = Drill(**_drill_values(fields))
    s.add(drill)
    s.flush()
    logger.info("drill_created", extra={"drill_id": drill.id})
    return drill_to_dict(drill)


def update_drill(s: Session, drill_id: int, fields: dict[str, Any]) -> dict[str, Any] | None:
    """Replace every editable column. Returns None for an unknown id."""
    drill = s.get(Drill, drill_id)
    if drill is None:
        return None
    for key, value in _drill_values(fields).items():
        setattr(drill, key, value)
    s.flush()
    logger.info("drill_updated", extra={"drill_id": drill_id})
    return drill_to_dict(drill)


def _practice_values(s: Session, fields: dict[str, Any]) -> dict[str, Any]:
    values = {k: fields.get(k) for k in PRACTICE_FIELDS}
    if values["team_id"] is not None and s.get(Team, values["team_id"]) is None:
        raise TeamNotFound(values["team_id"])
    # Phase dicts are stored as given so id, type and drill order survive.
    values["phases"] = [dict(phase) for phase in values["phases"] or []]
    return values


def create_practice(s: Session, fields: dict[str, Any]) -> dict[str, Any]:
    practice = Practice(**_practice_values(s, fields))
    s.add(practice)
    s.flush()
    logger.info("practice_created", extra={"practice_id": practice.id, "phases": len(practice.phases)})
    return get_practice(s, practice.id)


def update_practice(s: Session, practice_id: int, fields: dict[str, Any]) -> dict[str, Any] | None:
    """Replace every editable column. Returns None for an unknown id."""
    practice = s.get(Practice, practice_id)
    if practice is None:
        return None
    for key, value in _practice_values(s, fields).items():
        setattr(practice, key, value)
    s.flush()
    logger.info("practice_updated", extra={"practice_id": practice_id, "phases": len(practice.phases)})
    return get_practice(s, practice_id)


def delete_drill(s: Session, drill_id: int) -> int:
    return s.execute(delete(Drill).where(Drill.id == drill_id)).rowcount or 0


def delete_practice(s: Session, practice_id: int) -> int:
    """Delete a practice; its sessions, attendance and notes go with it."""
    changes = s.execute(delete(Practice).where(Practice.id == practice_id)).rowcount or 0
    logger.info("practice_deleted", extra={"practice_id": practice_id, "changes": changes})
    return changes
