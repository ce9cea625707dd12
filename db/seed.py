"""Demo data for a fresh PracTrac database.

Seeds one team with six players, four drills, one four-phase practice and
eight training videos. Seeding only happens when the teams table is empty.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from core.db import ensure_schema, session_scope
from core.models import Drill, Player, Practice, Team, Video

logger = logging.getLogger(__name__)

DEMO_TEAM: dict[str, Any] = {
    "name": "Riverside High Volleyball",
    "season": "Fall 2025",
    "division": "Varsity",
    "coach": "Sarah Johnson",
}

# Stats left out of a row stay NULL and read back as 0.
DEMO_PLAYERS: list[dict[str, Any]] = [
    {"first_name": "Emma", "last_name": "Martinez", "jersey_number": 12, "position": "Outside Hitter", "skill_level": 4, "height": "5'8\"", "year": "Junior", "kills": 145, "blocks": 23, "aces": 31, "digs": 89},
    {"first_name": "Olivia", "last_name": "Chen", "jersey_number": 8, "position": "Setter", "skill_level": 5, "height": "5'6\"", "year": "Senior", "assists": 298, "kills": 34, "aces": 18, "digs": 67},
    {"first_name": "Sophia", "last_name": "Williams", "jersey_number": 15, "position": "Middle Blocker", "skill_level": 4, "height": "6'1\"", "year": "Sophomore", "kills": 89, "blocks": 67, "aces": 12, "digs": 45},
    {"first_name": "Ava", "last_name": "Thompson", "jersey_number": 6, "position": "Libero", "skill_level": 5, "height": "5'4\"", "year": "Senior", "kills": 8, "blocks": 0, "aces": 15, "digs": 234},
    {"first_name": "Isabella", "last_name": "Davis", "jersey_number": 3, "position": "Right Side", "skill_level": 3, "height": "5'10\"", "year": "Junior", "kills": 78, "blocks": 34, "aces": 22, "digs": 56},
    {"first_name": "Mia", "last_name": "Rodriguez", "jersey_number": 11, "position": "Outside Hitter", "skill_level": 4, "height": "5'9\"", "year": "Sophomore", "kills": 112, "blocks": 18, "aces": 28, "digs": 72},
]

DEMO_DRILLS: list[dict[str, Any]] = [
    {
        "name": "Pepper Warm-up",
        "category": "Warm-up",
        "duration": 10,
        "difficulty": 2,
        "description": "Basic partner passing and setting to warm up",
        "equipment": ["Volleyballs"],
        "min_players": 2,
        "max_players": 12,
        "focus": ["Passing", "Setting", "Ball Control"],
    },
    {
        "name": "Attack Line Hitting",
        "category": "Offense",
        "duration": 20,
        "difficulty": 4,
        "description": "Practice attacking from different positions along the net",
        "equipment": ["Volleyballs", "Net"],
        "min_players": 6,
        "max_players": 12,
        "focus": ["Attacking", "Timing", "Footwork"],
    },
    {
        "name": "Block and Transition",
        "category": "Defense",
        "duration": 15,
        "difficulty": 4,
        "description": "Practice blocking and quick transition to offense",
        "equipment": ["Volleyballs", "Net"],
        "min_players": 6,
        "max_players": 12,
        "focus": ["Blocking", "Transition", "Communication"],
    },
    {
        "name": "Serve and Pass",
        "category": "Serve/Receive",
        "duration": 15,
        "difficulty": 3,
        "description": "Practice serving accuracy and passing under pressure",
        "equipment": ["Volleyballs", "Targets"],
        "min_players": 4,
        "max_players": 8,
        "focus": ["Serving", "Passing", "Pressure"],
    },
]

DEMO_PRACTICE: dict[str, Any] = {
    "name": "Championship Prep",
    "date": date(2025, 10, 8),
    "duration": 120,
    "phases": [
        {"id": 1, "name": "Dynamic Warm-up", "duration": 15, "type": "warmup", "drills": [1]},
        {"id": 2, "name": "Skill Development", "duration": 45, "type": "skill", "drills": [2, 4]},
        {"id": 3, "name": "Game Situations", "duration": 40, "type": "scrimmage", "drills": [3]},
        {"id": 4, "name": "Cool Down", "duration": 20, "type": "cooldown", "drills": []},
    ],
}

DEMO_VIDEOS: list[dict[str, Any]] = [
    {"title": "Perfect Spike Technique", "category": "Attacking", "duration": "3:45", "thumbnail": "/static/images/spike-thumb.jpg", "description": "Learn the fundamentals of a powerful volleyball spike with proper approach and contact"},
    {"title": "Setter Hand Position", "category": "Setting", "duration": "2:30", "thumbnail": "/static/images/setting-thumb.jpg", "description": "Master the proper hand positioning for consistent and accurate sets"},
    {"title": "Defensive Positioning", "category": "Defense", "duration": "4:15", "thumbnail": "/static/images/defense-thumb.jpg", "description": "Understanding court positioning and reading the game for effective defense"},
    {"title": "Serving Accuracy Drills", "category": "Serving", "duration": "5:20", "thumbnail": "/static/images/serve-thumb.jpg", "description": "Improve serving consistency and target accuracy with progressive drills"},
    {"title": "Quick Attack Timing", "category": "Attacking", "duration": "3:30", "thumbnail": "/static/images/quick-attack-thumb.jpg", "description": "Perfect the timing between setter and attacker for quick attacks"},
    {"title": "Passing Fundamentals", "category": "Defense", "duration": "6:10", "thumbnail": "/static/images/passing-thumb.jpg", "description": "Basic passing technique, platform formation, and ball control"},
    {"title": "Blocking Mechanics", "category": "Defense", "duration": "4:45", "thumbnail": "/static/images/blocking-thumb.jpg", "description": "Proper blocking technique, timing, and court positioning"},
    {"title": "Team Rotation Systems", "category": "Strategy", "duration": "7:30", "thumbnail": "/static/images/rotation-thumb.jpg", "description": "Understanding 6-2 and 5-1 rotation systems and player movement"},
]


def seed_demo_rows(s: Session) -> bool:
    """Insert the demo rows into ``s`` unless a team already exists."""
    if s.execute(select(func.count()).select_from(Team)).scalar_one():
        return False

    team = Team(**DEMO_TEAM)
    s.add(team)
    s.flush()
    s.add_all([Player(team_id=team.id, **p) for p in DEMO_PLAYERS])
    s.add_all([Drill(**d) for d in DEMO_DRILLS])
    s.add(Practice(team_id=team.id, **DEMO_PRACTICE))
    s.add_all([Video(**v) for v in DEMO_VIDEOS])
    s.flush()
    return True


def seed_demo_data() -> bool:
    with session_scope() as s:
        seeded = seed_demo_rows(s)
    if seeded:
        logger.info(
            "demo_data_seeded",
            extra={
                "players": len(DEMO_PLAYERS),
                "drills": len(DEMO_DRILLS),
                "videos": len(DEMO_VIDEOS),
            },
        )
    else:
        logger.debug("demo_data_already_present")
    return seeded


def main() -> None:
    ensure_schema()
    seeded = seed_demo_data()
    print("Seeding complete" if seeded else "Database already seeded")


if __name__ == "__main__":
    main()
