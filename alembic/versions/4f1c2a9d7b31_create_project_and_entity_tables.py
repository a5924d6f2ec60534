"""Create project and entity tables

Revision ID: 4f1c2a9d7b31
Revises:
Create Date: 2026-10-18 09:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f1c2a9d7b31'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ENTITY_TABLES = (
    ('architect', 'ArchitectID'),
    ('contractor', 'ContractorID'),
    ('customer', 'CustomerID'),
)


def upgrade() -> None:
    """Upgrade schema."""
    for table_name, id_column in ENTITY_TABLES:
        op.create_table(
            table_name,
            sa.Column(id_column, sa.String(length=20), nullable=False),
            sa.Column('FirstName', sa.String(length=100), nullable=False),
            sa.Column('Surname', sa.String(length=100), nullable=False),
            sa.Column('Telephone', sa.String(length=15), nullable=False),
            sa.Column('Email', sa.String(length=255), nullable=False),
            sa.Column('PhysicalAddress', sa.String(length=255), nullable=False),
            sa.PrimaryKeyConstraint(id_column),
        )
        op.create_index(op.f(f'ix_{table_name}_{id_column}'), table_name, [id_column], unique=False)
        op.create_index(op.f(f'ix_{table_name}_Surname'), table_name, ['Surname'], unique=False)

    op.create_table(
        'project',
        sa.Column('ProjectNumber', sa.String(length=20), nullable=False),
        sa.Column('ProjectName', sa.String(length=200), nullable=True),
        sa.Column('Deadline', sa.Date(), nullable=False),
        sa.Column('BuildingType', sa.String(length=100), nullable=True),
        sa.Column('PhysicalAddress', sa.String(length=255), nullable=True),
        sa.Column('ERFNumber', sa.String(length=50), nullable=True),
        sa.Column('TotalFee', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('TotalPaid', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('ArchitectID', sa.String(length=20), nullable=True),
        sa.Column('ContractorID', sa.String(length=20), nullable=True),
        sa.Column('CustomerID', sa.String(length=20), nullable=True),
        sa.Column('Finalised', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('CompletionDate', sa.Date(), nullable=True),
        sa.ForeignKeyConstraint(['ArchitectID'], ['architect.ArchitectID']),
        sa.ForeignKeyConstraint(['ContractorID'], ['contractor.ContractorID']),
        sa.ForeignKeyConstraint(['CustomerID'], ['customer.CustomerID']),
        sa.PrimaryKeyConstraint('ProjectNumber'),
    )
    for column in ('ProjectNumber', 'ProjectName', 'Deadline', 'ArchitectID', 'ContractorID',
                   'CustomerID', 'Finalised'):
        op.create_index(op.f(f'ix_project_{column}'), 'project', [column], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    for column in ('ProjectNumber', 'ProjectName', 'Deadline', 'ArchitectID', 'ContractorID',
                   'CustomerID', 'Finalised'):
        op.drop_index(op.f(f'ix_project_{column}'), table_name='project')
    op.drop_table('project')

    for table_name, id_column in reversed(ENTITY_TABLES):
        op.drop_index(op.f(f'ix_{table_name}_Surname'), table_name=table_name)
        op.drop_index(op.f(f'ix_{table_name}_{id_column}'), table_name=table_name)
        op.drop_table(table_name)
