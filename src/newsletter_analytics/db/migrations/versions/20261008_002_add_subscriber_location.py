"""Add location and audience profile columns to subscribers.

Revision ID: 002
Revises: 001
Create Date: 2026-10-08 10:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: str = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

PROFILE_COLUMNS = (
    ("country", 2),
    ("country_name", 200),
    ("region", 200),
    ("city", 200),
    ("audience", 50),
    ("company_size", 50),
    ("seniority", 50),
    ("registration_source", 200),
)


def upgrade() -> None:
    for name, length in PROFILE_COLUMNS:
        op.add_column("subscribers", sa.Column(name, sa.String(length=length), nullable=True))
    op.create_index("ix_subscribers_country", "subscribers", ["country"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_subscribers_country", table_name="subscribers")
    for name, _length in reversed(PROFILE_COLUMNS):
        op.drop_column("subscribers", name)
