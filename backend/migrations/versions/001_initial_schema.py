"""Initial schema: organizations, accounts, documents and settings

Revision ID: 001
Revises:
Create Date: 2026-01-05 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None

DOCUMENT_TABLES = ('invoice', 'purchase_order', 'receipt')


def _id_column():
    return sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False)


def _timestamp(name, nullable=False):
    if nullable:
        return sa.Column(name, sa.TIMESTAMP(timezone=True), nullable=True)
    return sa.Column(name, sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False)


def _org_fk(table):
    return sa.ForeignKeyConstraint(['org_id'], ['org.id'], name=f'fk_{table}_org_id', ondelete='CASCADE')


def _document_columns():
    """Columns shared by invoice, purchase_order and receipt."""
    return [
        _id_column(),
        sa.Column('org_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('created_by', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('company', postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        _timestamp('deleted_at', nullable=True),
    ]


def _priced_columns():
    return [
        sa.Column('items', postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column('subtotal', sa.Numeric(18, 2), server_default='0', nullable=False),
        sa.Column('tax_rate', sa.Numeric(5, 2), server_default='0', nullable=False),
        sa.Column('tax_amount', sa.Numeric(18, 2), server_default='0', nullable=False),
        sa.Column('total', sa.Numeric(18, 2), server_default='0', nullable=False),
        sa.Column('terms', sa.Text(), nullable=True),
        sa.Column('status', sa.Text(), server_default='draft', nullable=False),
    ]


def _document_constraints(table):
    return [
        sa.PrimaryKeyConstraint('id'),
        _org_fk(table),
        sa.ForeignKeyConstraint(['created_by'], ['user.id'], name=f'fk_{table}_created_by', ondelete='SET NULL'),
    ]


def upgrade():
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    # Tenancy and accounts
    op.create_table(
        'org',
        _id_column(),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('settings_json', postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'{}'::jsonb"), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'user',
        _id_column(),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('name', sa.Text(), nullable=True),
        sa.Column('image_key', sa.Text(), nullable=True),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('status', sa.Text(), server_default='ACTIVE', nullable=False),
        _timestamp('last_login_at', nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', name='uq_user_email'),
        sa.CheckConstraint("status IN ('ACTIVE', 'DISABLED')", name='ck_user_status'),
    )

    op.create_table(
        'organization_member',
        _id_column(),
        sa.Column('org_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('role', sa.Text(), nullable=False),
        _timestamp('joined_at'),
        sa.PrimaryKeyConstraint('id'),
        _org_fk('organization_member'),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], name='fk_organization_member_user_id', ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', name='uq_organization_member_user'),
        sa.CheckConstraint("role IN ('owner', 'admin', 'member')", name='ck_organization_member_role'),
    )
    op.create_index('ix_organization_member_org_id', 'organization_member', ['org_id'])

    op.create_table(
        'invitation',
        _id_column(),
        sa.Column('org_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('role', sa.Text(), nullable=False),
        sa.Column('token', sa.Text(), nullable=False),
        sa.Column('status', sa.Text(), server_default='pending', nullable=False),
        sa.Column('invited_by', postgresql.UUID(as_uuid=True), nullable=True),
        _timestamp('expires_at'),
        _timestamp('accepted_at', nullable=True),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
        _org_fk('invitation'),
        sa.ForeignKeyConstraint(['invited_by'], ['user.id'], name='fk_invitation_invited_by', ondelete='SET NULL'),
        sa.UniqueConstraint('token', name='uq_invitation_token'),
        sa.CheckConstraint("role IN ('admin', 'member')", name='ck_invitation_role'),
        sa.CheckConstraint("status IN ('pending', 'accepted', 'expired')", name='ck_invitation_status'),
    )
    op.create_index('ix_invitation_org_id_status', 'invitation', ['org_id', 'status'])
    op.create_index('ix_invitation_email', 'invitation', ['email'])

    op.create_table(
        'password_reset_token',
        _id_column(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('token', sa.Text(), nullable=False),
        _timestamp('expires_at'),
        _timestamp('used_at', nullable=True),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], name='fk_password_reset_token_user_id', ondelete='CASCADE'),
        sa.UniqueConstraint('token', name='uq_password_reset_token_token'),
    )
    op.create_index('ix_password_reset_token_user_id', 'password_reset_token', ['user_id'])

    op.create_table(
        'audit_log',
        _id_column(),
        sa.Column('org_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('actor_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('action', sa.Text(), nullable=False),
        sa.Column('entity_type', sa.Text(), nullable=True),
        sa.Column('entity_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('metadata_json', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('ip_address', sa.Text(), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
        _org_fk('audit_log'),
        sa.ForeignKeyConstraint(['actor_id'], ['user.id'], name='fk_audit_log_actor_id', ondelete='SET NULL'),
    )
    op.create_index('ix_audit_log_org_id', 'audit_log', ['org_id'])
    op.create_index('ix_audit_log_org_id_created_at', 'audit_log', ['org_id', 'created_at'])
    op.create_index('ix_audit_log_org_id_entity', 'audit_log', ['org_id', 'entity_type', 'entity_id'])

    # Customers and numbering
    op.create_table(
        'customer',
        _id_column(),
        sa.Column('org_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('created_by', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('address', sa.Text(), server_default='', nullable=False),
        sa.Column('phone', sa.Text(), nullable=True),
        sa.Column('email', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
        _org_fk('customer'),
        sa.ForeignKeyConstraint(['created_by'], ['user.id'], name='fk_customer_created_by', ondelete='SET NULL'),
    )
    op.create_index('ix_customer_org_id', 'customer', ['org_id'])
    op.create_index('ix_customer_org_id_name', 'customer', ['org_id', 'name'])

    op.create_table(
        'document_counter',
        _id_column(),
        sa.Column('org_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('type', sa.Text(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('prefix', sa.Text(), nullable=False),
        sa.Column('last_number', sa.Integer(), server_default='0', nullable=False),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
        _org_fk('document_counter'),
        sa.UniqueConstraint('org_id', 'type', 'year', name='uq_document_counter_org_type_year'),
        sa.CheckConstraint("type IN ('invoice', 'purchase_order', 'receipt')", name='ck_document_counter_type'),
        sa.CheckConstraint('last_number >= 0', name='ck_document_counter_last_number'),
    )

    # Documents
    op.create_table(
        'invoice',
        *_document_columns(),
        sa.Column('invoice_number', sa.Text(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('customer', postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'{}'::jsonb"), nullable=False),
        *_priced_columns(),
        *_document_constraints('invoice'),
        sa.ForeignKeyConstraint(['customer_id'], ['customer.id'], name='fk_invoice_customer_id', ondelete='SET NULL'),
        sa.UniqueConstraint('org_id', 'invoice_number', name='uq_invoice_org_number'),
        sa.CheckConstraint(
            "status IN ('draft', 'sent', 'paid', 'overdue', 'cancelled')",
            name='ck_invoice_status',
        ),
    )
    op.create_index('ix_invoice_org_id_status', 'invoice', ['org_id', 'status'])
    op.create_index('ix_invoice_org_id_date', 'invoice', ['org_id', 'date'])
    op.create_index('ix_invoice_status_due_date', 'invoice', ['status', 'due_date'])

    op.create_table(
        'purchase_order',
        *_document_columns(),
        sa.Column('po_number', sa.Text(), nullable=False),
        sa.Column('expected_delivery_date', sa.Date(), nullable=True),
        sa.Column('vendor', postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column('shipping_address', sa.Text(), nullable=True),
        *_priced_columns(),
        *_document_constraints('purchase_order'),
        sa.UniqueConstraint('org_id', 'po_number', name='uq_purchase_order_org_number'),
        sa.CheckConstraint(
            "status IN ('draft', 'sent', 'confirmed', 'received', 'cancelled')",
            name='ck_purchase_order_status',
        ),
    )
    op.create_index('ix_purchase_order_org_id_status', 'purchase_order', ['org_id', 'status'])
    op.create_index('ix_purchase_order_org_id_date', 'purchase_order', ['org_id', 'date'])

    op.create_table(
        'receipt',
        *_document_columns(),
        sa.Column('receipt_number', sa.Text(), nullable=False),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('received_from', sa.Text(), nullable=False),
        sa.Column('amount', sa.Numeric(18, 2), nullable=False),
        sa.Column('amount_in_words', sa.Text(), nullable=False),
        sa.Column('payment_method', sa.Text(), nullable=False),
        sa.Column('payment_for', sa.Text(), nullable=False),
        *_document_constraints('receipt'),
        sa.ForeignKeyConstraint(['customer_id'], ['customer.id'], name='fk_receipt_customer_id', ondelete='SET NULL'),
        sa.UniqueConstraint('org_id', 'receipt_number', name='uq_receipt_org_number'),
        sa.CheckConstraint(
            "payment_method IN ('cash', 'transfer', 'check', 'other')",
            name='ck_receipt_payment_method',
        ),
    )
    op.create_index('ix_receipt_org_id_date', 'receipt', ['org_id', 'date'])

    # Partial indexes for the common "active documents" listing
    for table in DOCUMENT_TABLES:
        op.create_index(
            f'ix_{table}_org_id_active',
            table,
            ['org_id', 'created_at'],
            postgresql_where=sa.text('deleted_at IS NULL'),
        )

    # Organization settings
    op.create_table(
        'company_settings',
        _id_column(),
        sa.Column('org_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('phone', sa.Text(), nullable=True),
        sa.Column('email', sa.Text(), nullable=True),
        sa.Column('website', sa.Text(), nullable=True),
        sa.Column('tax_id', sa.Text(), nullable=True),
        sa.Column('logo_key', sa.Text(), nullable=True),
        sa.Column('signature_key', sa.Text(), nullable=True),
        sa.Column('stamp_key', sa.Text(), nullable=True),
        sa.Column('bank_name', sa.Text(), nullable=True),
        sa.Column('bank_account', sa.Text(), nullable=True),
        sa.Column('bank_account_name', sa.Text(), nullable=True),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
        _org_fk('company_settings'),
        sa.UniqueConstraint('org_id', name='uq_company_settings_org'),
    )

    op.create_table(
        'bank_account',
        _id_column(),
        sa.Column('org_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('bank_name', sa.Text(), nullable=False),
        sa.Column('account_number', sa.Text(), nullable=False),
        sa.Column('account_holder', sa.Text(), nullable=False),
        sa.Column('branch', sa.Text(), nullable=True),
        sa.Column('swift_code', sa.Text(), nullable=True),
        sa.Column('is_default', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
        _org_fk('bank_account'),
    )
    op.create_index('ix_bank_account_org_id', 'bank_account', ['org_id'])

    op.create_table(
        'terms_template',
        _id_column(),
        sa.Column('org_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('type', sa.Text(), nullable=False),
        sa.Column('is_default', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
        _org_fk('terms_template'),
        sa.CheckConstraint("type IN ('invoice', 'purchase_order', 'both')", name='ck_terms_template_type'),
    )
    op.create_index('ix_terms_template_org_id', 'terms_template', ['org_id'])

    op.create_table(
        'email_settings',
        _id_column(),
        sa.Column('org_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('smtp_host', sa.Text(), nullable=False),
        sa.Column('smtp_port', sa.Integer(), nullable=False),
        sa.Column('smtp_secure', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('smtp_user', sa.Text(), nullable=False),
        sa.Column('smtp_password_encrypted', sa.Text(), nullable=False),
        sa.Column('sender_name', sa.Text(), nullable=False),
        sa.Column('sender_email', sa.Text(), nullable=False),
        sa.Column('reply_to_email', sa.Text(), nullable=True),
        sa.Column('email_header_color', sa.Text(), nullable=True),
        sa.Column('email_footer_text', sa.Text(), nullable=True),
        sa.Column('include_payment_info', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('reminder_enabled', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('reminder_days_before_due', sa.Integer(), nullable=True),
        sa.Column('reminder_days_after_due', sa.Integer(), nullable=True),
        sa.Column('reminder_subject', sa.Text(), nullable=True),
        sa.Column('reminder_message', sa.Text(), nullable=True),
        sa.Column('test_status', sa.Text(), nullable=True),
        _timestamp('last_tested_at', nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
        _org_fk('email_settings'),
        sa.UniqueConstraint('org_id', name='uq_email_settings_org'),
        sa.CheckConstraint(
            "test_status IS NULL OR test_status IN ('success', 'failed')",
            name='ck_email_settings_test_status',
        ),
    )

    op.create_table(
        'email_log',
        _id_column(),
        sa.Column('org_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('document_type', sa.Text(), nullable=False),
        sa.Column('document_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('recipient_email', sa.Text(), nullable=False),
        sa.Column('recipient_name', sa.Text(), nullable=True),
        sa.Column('subject', sa.Text(), nullable=False),
        sa.Column('status', sa.Text(), server_default='pending', nullable=False),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('sent_by', postgresql.UUID(as_uuid=True), nullable=True),
        _timestamp('sent_at', nullable=True),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
        _org_fk('email_log'),
        sa.ForeignKeyConstraint(['sent_by'], ['user.id'], name='fk_email_log_sent_by', ondelete='SET NULL'),
        sa.CheckConstraint(
            "document_type IN ('invoice', 'purchase_order', 'receipt')",
            name='ck_email_log_document_type',
        ),
        sa.CheckConstraint("status IN ('pending', 'sent', 'failed')", name='ck_email_log_status'),
    )
    op.create_index('ix_email_log_org_id_document', 'email_log', ['org_id', 'document_type', 'document_id'])


def downgrade():
    op.drop_table('email_log')
    op.drop_table('email_settings')
    op.drop_table('terms_template')
    op.drop_table('bank_account')
    op.drop_table('company_settings')
    for table in reversed(DOCUMENT_TABLES):
        op.drop_index(f'ix_{table}_org_id_active', table_name=table)
    op.drop_table('receipt')
    op.drop_table('purchase_order')
    op.drop_table('invoice')
    op.drop_table('document_counter')
    op.drop_table('customer')
    op.drop_table('audit_log')
    op.drop_table('password_reset_token')
    op.drop_table('invitation')
    op.drop_table('organization_member')
    op.drop_table('user')
    op.drop_table('org')

    # pgcrypto is left installed; other schemas may rely on it
