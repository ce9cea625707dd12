from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, Response, status
from sqlalchemy import text

from api.observability import bind_log_context
from api.ratelimit import limiter, write_limit
from api.schemas import (
    ChangesOut,
    DrillIn,
    DrillOut,
    HealthOut,
    PlayerAttendanceOut,
    PlayerNoteHistoryItem,
    PlayerOut,
    PracticeIn,
    PracticeOut,
    QueryStatsOut,
    TeamOut,
    TeamStatsOut,
    VideoOut,
)
from core.db import get_query_stats, session_scope
from core.services import attendance as attendance_service
from core.services import catalog

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api")


@router.get("/health", response_model=HealthOut, tags=["health"])
def health():
    with session_scope() as s:
        s.execute(text("SELECT 1"))
    stats = get_query_stats()
    return HealthOut(
        status="ok",
        database="ok",
        queries=QueryStatsOut(total=stats.total, slow=stats.slow, p50_ms=stats.p50_ms, p95_ms=stats.p95_ms),
    )


@router.get("/teams", response_model=list[TeamOut], tags=["teams"])
def list_teams():
    with session_scope() as s:
        return [TeamOut(**t) for t in catalog.list_teams(s)]


@router.get("/team/stats", response_model=TeamStatsOut, tags=["teams"])
def team_stats():
    with session_scope() as s:
        return TeamStatsOut(**catalog.team_stats(s))


@router.get("/players", response_model=list[PlayerOut], tags=["players"])
def list_players():
    with session_scope() as s:
        return [PlayerOut(**p) for p in catalog.list_players(s)]


@router.get("/players/{player_id}", response_model=PlayerOut, tags=["players"])
def get_player(player_id: int):
    with session_scope() as s:
        player = catalog.get_player(s, player_id)
    if player is None:
        raise HTTPException(status_code=404, detail="Player not found")
    return PlayerOut(**player)


@router.get("/players/{player_id}/notes", response_model=list[PlayerNoteHistoryItem], tags=["players"])
def list_player_notes(player_id: int):
    with session_scope() as s:
        return [PlayerNoteHistoryItem(**n) for n in attendance_service.list_player_notes(s, player_id)]


@router.get("/players/{player_id}/attendance", response_model=PlayerAttendanceOut, tags=["players"])
def player_attendance(player_id: int):
    with session_scope() as s:
        summary = attendance_service.player_attendance(s, player_id)
    if summary is None:
        raise HTTPException(status_code=404, detail="Player not found")
    return PlayerAttendanceOut(**summary)


@router.get("/drills", response_model=list[DrillOut], tags=["drills"])
def list_drills():
    with session_scope() as s:
        return [DrillOut(**d) for d in catalog.list_drills(s)]


@router.get("/drills/{drill_id}", response_model=DrillOut, tags=["drills"])
def get_drill(drill_id: int):
    with session_scope() as s:
        drill = catalog.get_drill(s, drill_id)
    if drill is None:
        raise HTTPException(status_code=404, detail="Drill not found")
    return DrillOut(**drill)


@router.post("/drills", response_model=DrillOut, status_code=status.HTTP_201_CREATED, tags=["drills"])
@limiter.limit(write_limit)
def create_drill(request: Request, response: Response, body: DrillIn):
    del request, response
    with session_scope() as s:
        return DrillOut(**catalog.create_drill(s, body.model_dump()))


@router.put("/drills/{drill_id}", response_model=DrillOut, tags=["drills"])
@limiter.limit(write_limit)
def update_drill(request: Request, response: Response, drill_id: int, body: DrillIn):
    del request, response
    bind_log_context(drill_id=drill_id)
    with session_scope() as s:
        drill = catalog.update_drill(s, drill_id, body.model_dump())
    if drill is None:
        raise HTTPException(status_code=404, detail="Drill not found")
    return DrillOut(**drill)


@router.delete("/drills/{drill_id}", response_model=ChangesOut, tags=["drills"])
@limiter.limit(write_limit)
def delete_drill(request: Request, response: Response, drill_id: int):
    del request, response
    bind_log_context(drill_id=drill_id)
    with session_scope() as s:
        changes = catalog.delete_drill(s, drill_id)
    if not changes:
        raise HTTPException(status_code=404, detail="Drill not found")
    return ChangesOut(changes=changes)


@router.get("/practices", response_model=list[PracticeOut], tags=["practices"])
def list_practices():
    with session_scope() as s:
        return [PracticeOut(**p) for p in catalog.list_practices(s)]


@router.get("/practices/{practice_id}", response_model=PracticeOut, tags=["practices"])
def get_practice(practice_id: int):
    with session_scope() as s:
        practice = catalog.get_practice(s, practice_id)
    if practice is None:
        raise HTTPException(status_code=404, detail="Practice not found")
    return PracticeOut(**practice)


def _practice_fields(body: PracticeIn) -> dict:
    fields = body.model_dump(exclude={"phases"})
    fields["phases"] = [phase.model_dump(exclude_none=True) for phase in body.phases]
    return fields


@router.post("/practices", response_model=PracticeOut, status_code=status.HTTP_201_CREATED, tags=["practices"])
@limiter.limit(write_limit)
def create_practice(request: Request, response: Response, body: PracticeIn):
    del request, response
    bind_log_context(team_id=body.team_id)
    try:
        with session_scope() as s:
            return PracticeOut(**catalog.create_practice(s, _practice_fields(body)))
    except catalog.TeamNotFound:
        raise HTTPException(status_code=404, detail="Team not found")


@router.put("/practices/{practice_id}", response_model=PracticeOut, tags=["practices"])
@limiter.limit(write_limit)
def update_practice(request: Request, response: Response, practice_id: int, body: PracticeIn):
    del request, response
    bind_log_context(practice_id=practice_id, team_id=body.team_id)
    try:
        with session_scope() as s:
            practice = catalog.update_practice(s, practice_id, _practice_fields(body))
    except catalog.TeamNotFound:
        raise HTTPException(status_code=404, detail="Team not found")
    if practice is None:
        raise HTTPException(status_code=404, detail="Practice not found")
    return PracticeOut(**practice)


@router.delete("/practices/{practice_id}", response_model=ChangesOut, tags=["practices"])
@limiter.limit(write_limit)
def delete_practice(request: Request, response: Response, practice_id: int):
    del request, response
    bind_log_context(practice_id=practice_id)
    with session_scope() as s:
        changes = catalog.delete_practice(s, practice_id)
    if not changes:
        raise HTTPException(status_code=404, detail="Practice not found")
    return ChangesOut(changes=changes)


@router.get("/videos", response_model=list[VideoOut], tags=["videos"])
def list_videos():
    with session_scope() as s:
        return [VideoOut.model_validate(v) for v in catalog.list_videos(s)]
