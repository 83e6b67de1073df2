"""Initial migration: create tournament, participant, bracketsnapshot tables

Revision ID: 001_initial
Revises:
Create Date: 2026-10-01 00:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create tournament table
    op.create_table(
        "tournament",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("game_type", sa.String(), nullable=False),
        sa.Column("max_players", sa.Integer(), nullable=False),
        sa.Column("entry_fee", sa.Float(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("bracket_type", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("prize_breakdown", sa.JSON(), nullable=True),
        sa.Column("use_advanced_seeding", sa.Boolean(), nullable=False),
        sa.Column("seeding_options", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # Create participant table (no unique seed constraint: withdrawn rows keep stale seeds)
    op.create_table(
        "participant",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("tournament_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=True),
        sa.Column("display_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("seed", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("registered_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["tournament_id"],
            ["tournament.id"],
        ),
    )
    op.create_index("ix_participant_tournament_id", "participant", ["tournament_id"])

    # Create bracketsnapshot table
    op.create_table(
        "bracketsnapshot",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("tournament_id", sa.Integer(), nullable=False),
        sa.Column("bracket_type", sa.String(), nullable=False),
        sa.Column("total_rounds", sa.Integer(), nullable=False),
        sa.Column("total_matches", sa.Integer(), nullable=False),
        sa.Column("players", sa.JSON(), nullable=True),
        sa.Column("generated_at", sa.DateTime(), nullable=False),
        sa.Column("validation_status", sa.String(), nullable=False),
        sa.Column("validation_errors", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["tournament_id"],
            ["tournament.id"],
        ),
    )
    op.create_index("ix_bracketsnapshot_tournament_id", "bracketsnapshot", ["tournament_id"])


def downgrade() -> None:
    op.drop_index("ix_bracketsnapshot_tournament_id", table_name="bracketsnapshot")
    op.drop_table("bracketsnapshot")
    op.drop_index("ix_participant_tournament_id", table_name="participant")
    op.drop_table("participant")
    op.drop_table("tournament")
