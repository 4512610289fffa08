"""Create area, employee, user, document and tracking tables

Revision ID: 001
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Organizational structure
    op.create_table(
        'area',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', name='uq_area_name')
    )

    op.create_table(
        'employee',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('dni', sa.Text(), nullable=False),
        sa.Column('first_name', sa.Text(), nullable=False),
        sa.Column('last_name', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=True),
        sa.Column('phone', sa.Text(), nullable=True),
        sa.Column('area_id', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['area_id'], ['area.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint('dni', name='uq_employee_dni')
    )
    op.create_index('ix_employee_area_id', 'employee', ['area_id'])

    op.create_table(
        'app_user',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.Text(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('role', sa.Text(), nullable=False),
        sa.Column('area_id', sa.Integer(), nullable=True),
        sa.Column('employee_id', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['area_id'], ['area.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['employee_id'], ['employee.id'], ondelete='SET NULL'),
        sa.UniqueConstraint('username', name='uq_app_user_username')
    )
    op.create_index('ix_app_user_area_id', 'app_user', ['area_id'])
    op.create_index('ix_app_user_employee_id', 'app_user', ['employee_id'])

    op.create_table(
        'document_type',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', name='uq_document_type_name')
    )

    # Documents
    op.create_table(
        'process_document',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('process_number', sa.Text(), nullable=False),
        sa.Column('tracking_number', sa.Text(), nullable=False),
        sa.Column('document_type_id', sa.Integer(), nullable=False),
        sa.Column('priority', sa.Text(), server_default='Normal', nullable=False),
        sa.Column('origin_area_id', sa.Integer(), nullable=False),
        sa.Column('current_area_id', sa.Integer(), nullable=False),
        sa.Column('current_employee_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.Text(), server_default='Em Análise', nullable=False),
        sa.Column('subject', sa.Text(), nullable=False),
        sa.Column('folios', sa.Integer(), server_default=sa.text('1'), nullable=False),
        sa.Column('file_path', sa.Text(), nullable=True),
        sa.Column('sender_name', sa.Text(), nullable=True),
        sa.Column('sender_document_id', sa.Text(), nullable=True),
        sa.Column('sender_email', sa.Text(), nullable=True),
        sa.Column('sender_phone', sa.Text(), nullable=True),
        sa.Column('representation', sa.Text(), nullable=True),
        sa.Column('company_name', sa.Text(), nullable=True),
        sa.Column('company_tax_id', sa.Text(), nullable=True),
        sa.Column('deadline_days', sa.Integer(), nullable=True),
        sa.Column('deadline', sa.DateTime(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('version', sa.Integer(), server_default=sa.text('1'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['document_type_id'], ['document_type.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['origin_area_id'], ['area.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['current_area_id'], ['area.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['current_employee_id'], ['employee.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['created_by'], ['app_user.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint('tracking_number', name='uq_process_document_tracking_number'),
        sa.CheckConstraint(
            "priority IN ('Normal', 'Com Contagem de Prazo', 'Urgente')",
            name='ck_process_document_priority'
        ),
        sa.CheckConstraint(
            "status IN ('Pending', 'Em Análise', 'In Progress', 'Completed', 'Archived')",
            name='ck_process_document_status'
        ),
        sa.CheckConstraint('folios > 0', name='ck_process_document_folios'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_process_document_current_area_id', 'process_document', ['current_area_id'])
    op.create_index('ix_process_document_current_employee_id', 'process_document', ['current_employee_id'])
    op.create_index('ix_process_document_status', 'process_document', ['status'])
    op.create_index('ix_process_document_process_number', 'process_document', ['process_number'])

    # Tracking ledger. document_id has no foreign key: ledger rows survive document deletion.
    op.create_table(
        'document_tracking',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('document_id', sa.Integer(), nullable=False),
        sa.Column('from_area_id', sa.Integer(), nullable=False),
        sa.Column('to_area_id', sa.Integer(), nullable=False),
        sa.Column('from_employee_id', sa.Integer(), nullable=True),
        sa.Column('to_employee_id', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('attachment_path', sa.Text(), nullable=True),
        sa.Column('deadline_days', sa.Integer(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['from_area_id'], ['area.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['to_area_id'], ['area.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['from_employee_id'], ['employee.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['to_employee_id'], ['employee.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['created_by'], ['app_user.id'], ondelete='RESTRICT')
    )
    op.create_index(
        'ix_document_tracking_document_id_created_at',
        'document_tracking',
        ['document_id', 'created_at']
    )
    op.create_index('ix_document_tracking_created_at', 'document_tracking', ['created_at'])

    # Audit log (deletions and permission denials)
    op.create_table(
        'audit_log',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('actor_id', sa.Integer(), nullable=True),
        sa.Column('action', sa.Text(), nullable=False),
        sa.Column('entity_type', sa.Text(), nullable=True),
        sa.Column('entity_id', sa.Integer(), nullable=True),
        sa.Column('metadata_json', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['actor_id'], ['app_user.id'], ondelete='SET NULL')
    )
    op.create_index('ix_audit_log_created_at', 'audit_log', ['created_at'])
    op.create_index('ix_audit_log_entity', 'audit_log', ['entity_type', 'entity_id'])


def downgrade():
    op.drop_index('ix_audit_log_entity', table_name='audit_log')
    op.drop_index('ix_audit_log_created_at', table_name='audit_log')
    op.drop_table('audit_log')

    op.drop_index('ix_document_tracking_created_at', table_name='document_tracking')
    op.drop_index('ix_document_tracking_document_id_created_at', table_name='document_tracking')
    op.drop_table('document_tracking')

    op.drop_index('ix_process_document_process_number', table_name='process_document')
    op.drop_index('ix_process_document_status', table_name='process_document')
    op.drop_index('ix_process_document_current_employee_id', table_name='process_document')
    op.drop_index('ix_process_document_current_area_id', table_name='process_document')
    op.drop_table('process_document')

    op.drop_table('document_type')

    op.drop_index('ix_app_user_employee_id', table_name='app_user')
    op.drop_index('ix_app_user_area_id', table_name='app_user')
    op.drop_table('app_user')

    op.drop_index('ix_employee_area_id', table_name='employee')
    op.drop_table('employee')

    op.drop_table('area')
