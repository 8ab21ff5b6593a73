"""initial_schema

Revision ID: 000000000000
Revises: 
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '000000000000'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'potholes',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('lat', sa.Float(), nullable=False, comment='WGS84 latitude'),
        sa.Column('lng', sa.Float(), nullable=False, comment='WGS84 longitude'),
        sa.Column('location_desc', sa.Text(), nullable=False, comment="Normalized location description, e.g. 'Budapest, Váci út 12'"),
        sa.Column('road_position', sa.String(length=20), nullable=False, comment='center, edge or lane_change'),
        sa.Column('reports_count', sa.Integer(), server_default=sa.text('1'), nullable=False, comment='Number of citizen reports for this location'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False, comment='Timestamp when record was created'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('lat >= -90 AND lat <= 90', name='check_pothole_lat_range'),
        sa.CheckConstraint('lng >= -180 AND lng <= 180', name='check_pothole_lng_range'),
        sa.CheckConstraint('reports_count >= 1', name='check_pothole_reports_count_positive'),
        sa.CheckConstraint("road_position IN ('center', 'edge', 'lane_change')", name='check_pothole_road_position'),
    )
    op.create_index('idx_potholes_location_desc', 'potholes', ['location_desc'], unique=False)
    op.create_index('idx_potholes_reports_count', 'potholes', ['reports_count'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_potholes_reports_count', table_name='potholes')
    op.drop_index('idx_potholes_location_desc', table_name='potholes')
    op.drop_table('potholes')
