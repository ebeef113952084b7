"""create_job_listings

Creates the job_listings table holding every posting on the board.

Revision ID: 3f6c2a9d8e11
Revises:
Create Date: 2026-10-19 09:12:40.218733

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f6c2a9d8e11'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create job_listings."""
    op.create_table(
        'job_listings',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('post_date', sa.Date(), nullable=True),
        sa.Column('organisation', sa.String(), nullable=True),
        sa.Column('job_details', sa.Text(), nullable=True),
        sa.Column('vacancies', sa.Integer(), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('qualification', sa.String(), nullable=True),
        sa.Column('last_date', sa.Date(), nullable=True),
        sa.Column('salary', sa.String(), nullable=True),
        sa.Column('picture', sa.String(), nullable=True),
        sa.Column('more_details', sa.Text(), nullable=True),
        sa.Column('notification_link', sa.String(), nullable=True),
        sa.Column('apply_link', sa.String(), nullable=True),
    )
    op.create_index('ix_job_listings_id', 'job_listings', ['id'])


def downgrade() -> None:
    """Drop job_listings."""
    op.drop_index('ix_job_listings_id', table_name='job_listings')
    op.drop_table('job_listings')
