from alembic import op
import sqlalchemy as sa

revision = '0001_init'
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        'driver',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('first_name', sa.String(length=120), nullable=False),
        sa.Column('last_name', sa.String(length=120), nullable=False),
        sa.Column('employee_id', sa.String(length=64), nullable=True),
        sa.Column('dob', sa.Date(), nullable=False),
        sa.Column('ssn', sa.String(length=16), nullable=True),
        sa.Column('phone_primary', sa.String(length=32), nullable=False),
        sa.Column('phone_secondary', sa.String(length=32), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('street_number', sa.String(length=32), nullable=True),
        sa.Column('street_name', sa.String(length=120), nullable=True),
        sa.Column('city', sa.String(length=120), nullable=True),
        sa.Column('state_province', sa.String(length=64), nullable=True),
        sa.Column('country', sa.String(length=64), nullable=True),
        sa.Column('postal_code', sa.String(length=20), nullable=True),
        sa.Column('license_number', sa.String(length=64), nullable=False),
        sa.Column('license_state', sa.String(length=32), nullable=False),
        sa.Column('license_class', sa.String(length=16), nullable=False),
        sa.Column('license_class_other', sa.String(length=64), nullable=True),
        sa.Column('license_expiry', sa.Date(), nullable=False),
        sa.Column('med_cert_expiry', sa.Date(), nullable=False),
        sa.Column('twic_expiry', sa.Date(), nullable=True),
        sa.Column('hire_date', sa.Date(), nullable=False),
        sa.Column('driver_type', sa.String(length=32), nullable=False),
        sa.Column('employment_status', sa.String(length=32), nullable=False, server_default='active'),
        sa.Column('operating_base_city', sa.String(length=120), nullable=True),
        sa.Column('operating_base_state', sa.String(length=64), nullable=True),
        sa.Column('assigned_vehicle', sa.String(length=64), nullable=True),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='available'),
        sa.Column('load_id', sa.String(length=64), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('avatar_url', sa.String(length=512), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_driver_email', 'driver', ['email'], unique=True)
    op.create_index('ix_driver_last_name', 'driver', ['last_name'])
    op.create_index('ix_driver_status', 'driver', ['status'])
    op.create_index('ix_driver_employment_status', 'driver', ['employment_status'])

    op.create_table(
        'emergency_contact',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('driver_id', sa.String(length=36), sa.ForeignKey('driver.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('relationship', sa.String(length=64), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=False),
    )
    op.create_index('ix_emergency_contact_driver_id', 'emergency_contact', ['driver_id'])

    op.create_table(
        'endorsement',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('driver_id', sa.String(length=36), sa.ForeignKey('driver.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(length=1), nullable=False),
        sa.Column('expiry_date', sa.Date(), nullable=True),
    )
    op.create_index('ix_endorsement_driver_id', 'endorsement', ['driver_id'])

    op.create_table(
        'document',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('driver_id', sa.String(length=36), sa.ForeignKey('driver.id', ondelete='CASCADE'), nullable=False),
        sa.Column('file_name', sa.String(length=255), nullable=False),
        sa.Column('file_url', sa.String(length=1024), nullable=False),
        sa.Column('file_type', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_document_driver_id', 'document', ['driver_id'])

    op.create_table(
        'hours_of_service',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('driver_id', sa.String(length=36), sa.ForeignKey('driver.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('driving_hours_today', sa.Float(), nullable=False, server_default='0'),
        sa.Column('duty_hours_today', sa.Float(), nullable=False, server_default='0'),
        sa.Column('time_until_break_required', sa.Float(), nullable=False, server_default='0.5'),
    )

def downgrade() -> None:
    op.drop_table('hours_of_service')
    op.drop_index('ix_document_driver_id', table_name='document')
    op.drop_table('document')
    op.drop_index('ix_endorsement_driver_id', table_name='endorsement')
    op.drop_table('endorsement')
    op.drop_index('ix_emergency_contact_driver_id', table_name='emergency_contact')
    op.drop_table('emergency_contact')
    op.drop_index('ix_driver_employment_status', table_name='driver')
    op.drop_index('ix_driver_status', table_name='driver')
    op.drop_index('ix_driver_last_name', table_name='driver')
    op.drop_index('ix_driver_email', table_name='driver')
    op.drop_table('driver')
