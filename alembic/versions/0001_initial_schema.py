"""initial schema: users, players, matches

Revision ID: 0001
Revises:
Create Date: 2026-10-17
"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

UPDATED_AT_FUNCTION = """
CREATE OR REPLACE FUNCTION update_updated_at_column()
RETURNS TRIGGER AS $$
BEGIN
    NEW.updated_at = CURRENT_TIMESTAMP;
    RETURN NEW;
END;
$$ language 'plpgsql';
"""

TRIGGER_TABLES = ("users", "players")


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("username", sa.String(50), nullable=False, unique=True),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        "players",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("victories", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        "matches",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("first_player_name", sa.String(100), nullable=False),
        sa.Column("second_player_name", sa.String(100), nullable=False),
        sa.Column("first_player_score", sa.Integer, nullable=False),
        sa.Column("second_player_score", sa.Integer, nullable=False),
        sa.Column("match_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("first_player_name != second_player_name", name="different_players"),
    )

    op.create_index("idx_users_username", "users", ["username"])
    op.create_index("idx_players_name", "players", ["name"])
    op.create_index("idx_players_victories", "players", [sa.text("victories DESC")])
    op.create_index("idx_matches_first_player", "matches", ["first_player_name"])
    op.create_index("idx_matches_second_player", "matches", ["second_player_name"])
    op.create_index("idx_matches_date", "matches", [sa.text("match_date DESC")])

    # Other backends rely on the ORM's onupdate for updated_at
    if op.get_bind().dialect.name == "postgresql":
        op.execute(UPDATED_AT_FUNCTION)
        for table in TRIGGER_TABLES:
            op.execute(f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}")
            op.execute(
                f"CREATE TRIGGER update_{table}_updated_at "
                f"BEFORE UPDATE ON {table} "
                f"FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()"
            )


def downgrade():
    if op.get_bind().dialect.name == "postgresql":
        for table in TRIGGER_TABLES:
            op.execute(f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}")
        op.execute("DROP FUNCTION IF EXISTS update_updated_at_column() CASCADE")

    op.drop_table("matches")
    op.drop_table("players")
    op.drop_table("users")
