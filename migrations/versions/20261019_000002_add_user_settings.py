"""Add settings JSON to users.

Revision ID: 002_user_settings
Revises: 001_initial
Create Date: 2026-10-19

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "002_user_settings"
down_revision = "001_initial"
branch_labels = None
depends_on = None


def upgrade():
    # NULL means the user still has the default settings
    op.add_column("users", sa.Column("settings", sa.JSON(), nullable=True))


def downgrade():
    op.drop_column("users", "settings")
