"""practrac baseline schema"""

from alembic import op
import sqlalchemy as sa

revision = "0001_practrac_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("season", sa.String(40), nullable=False),
        sa.Column("division", sa.String(40), nullable=False),
        sa.Column("coach", sa.String(120), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(80), nullable=False),
        sa.Column("last_name", sa.String(80), nullable=False),
        sa.Column("jersey_number", sa.Integer(), nullable=False),
        sa.Column("position", sa.String(40), nullable=False),
        sa.Column("skill_level", sa.Integer(), nullable=False),
        sa.Column("height", sa.String(20)),
        sa.Column("year", sa.String(20)),
        sa.Column("kills", sa.Integer()),
        sa.Column("blocks", sa.Integer()),
        sa.Column("aces", sa.Integer()),
        sa.Column("digs", sa.Integer()),
        sa.Column("assists", sa.Integer()),
        sa.Column("team_id", sa.Integer(), sa.ForeignKey("teams.id", ondelete="CASCADE")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("skill_level between 1 and 5", name="ck_players_skill_level"),
    )
    op.create_index("ix_players_team_id", "players", ["team_id"])

    op.create_table(
        "drills",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("category", sa.String(60), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("difficulty", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("equipment", sa.JSON()),
        sa.Column("min_players", sa.Integer(), nullable=False),
        sa.Column("max_players", sa.Integer(), nullable=False),
        sa.Column("focus", sa.JSON()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("difficulty between 1 and 5", name="ck_drills_difficulty"),
    )
    op.create_index("ix_drills_category", "drills", ["category"])

    op.create_table(
        "practices",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("date", sa.Date()),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("phases", sa.JSON()),
        sa.Column("team_id", sa.Integer(), sa.ForeignKey("teams.id", ondelete="CASCADE")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_practices_date", "practices", ["date"])
    op.create_index("ix_practices_team_id", "practices", ["team_id"])

    op.create_table(
        "videos",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(160), nullable=False),
        sa.Column("category", sa.String(60), nullable=False),
        sa.Column("duration", sa.String(16), nullable=False),
        sa.Column("thumbnail", sa.String(255)),
        sa.Column("description", sa.Text()),
        sa.Column("url", sa.String(500)),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_videos_category", "videos", ["category"])

    op.create_table(
        "practice_sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("practice_id", sa.Integer(), sa.ForeignKey("practices.id", ondelete="CASCADE"), nullable=False),
        sa.Column("practice_name", sa.String(120)),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime()),
        sa.Column("current_phase", sa.Integer(), nullable=False),
        sa.Column("phase_start_time", sa.DateTime()),
        sa.Column("phase_timer_seconds", sa.Integer(), nullable=False),
        sa.Column("total_elapsed_seconds", sa.Integer(), nullable=False),
        sa.Column("is_paused", sa.Boolean(), nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("status in ('active', 'completed')", name="ck_practice_sessions_status"),
    )
    op.create_index("ix_practice_sessions_practice_id", "practice_sessions", ["practice_id"])
    op.create_index(
        "uq_practice_sessions_single_active",
        "practice_sessions",
        ["status"],
        unique=True,
        sqlite_where=sa.text("status = 'active'"),
        postgresql_where=sa.text("status = 'active'"),
    )

    op.create_table(
        "practice_attendance",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("session_id", sa.Integer(), sa.ForeignKey("practice_sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("player_id", sa.Integer(), sa.ForeignKey("players.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("notes", sa.Text()),
        sa.UniqueConstraint("session_id", "player_id", name="uq_attendance_session_player"),
    )
    op.create_index("ix_practice_attendance_session_id", "practice_attendance", ["session_id"])
    op.create_index("ix_practice_attendance_player_id", "practice_attendance", ["player_id"])

    op.create_table(
        "player_notes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("session_id", sa.Integer(), sa.ForeignKey("practice_sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("player_id", sa.Integer(), sa.ForeignKey("players.id", ondelete="CASCADE"), nullable=False),
        sa.Column("notes", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("session_id", "player_id", name="uq_player_notes_session_player"),
    )
    op.create_index("ix_player_notes_session_id", "player_notes", ["session_id"])
    op.create_index("ix_player_notes_player_id", "player_notes", ["player_id"])


def downgrade() -> None:
    for t in [
        "player_notes",
        "practice_attendance",
        "practice_sessions",
        "videos",
        "practices",
        "drills",
        "players",
        "teams",
    ]:
        op.drop_table(t)
