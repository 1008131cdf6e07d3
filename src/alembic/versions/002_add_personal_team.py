"""Mark the team created for a user at sign-up

Revision ID: 002
Revises: 001
Create Date: 2026-10-18 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.add_column("teams", sa.Column("personal_owner_id", sa.Uuid(), nullable=True))
    # NULLs do not collide, so only personal teams are constrained
    op.create_index(
        "ix_teams_personal_owner_id", "teams", ["personal_owner_id"], unique=True
    )


def downgrade() -> None:
    op.drop_index("ix_teams_personal_owner_id", table_name="teams")
    op.drop_column("teams", "personal_owner_id")
