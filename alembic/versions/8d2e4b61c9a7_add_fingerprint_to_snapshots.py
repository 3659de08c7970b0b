"""add fingerprint to performance snapshots

Revision ID: 8d2e4b61c9a7
Revises: 3f1c9a2b7d40
Create Date: 2026-10-17 09:41:05.118230

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8d2e4b61c9a7'
down_revision: Union[str, None] = '3f1c9a2b7d40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column('performance_snapshots', sa.Column('fingerprint', sa.String(), nullable=True))
    # Existing snapshots carry no fingerprint and are recomputed on next read
    op.execute("DELETE FROM performance_snapshots")


def downgrade() -> None:
    op.drop_column('performance_snapshots', 'fingerprint')
