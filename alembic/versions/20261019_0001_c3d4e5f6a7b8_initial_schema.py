"""initial schema

Revision ID: c3d4e5f6a7b8
Revises:
Create Date: 2026-10-19

Creates every table used by the API:
  - users, agent_profiles, builder_profiles, otp_records
  - projects, properties, favorites
  - inquiries, contact_messages, notifications
  - membership_plans, memberships, membership_requests, transactions
  - advertisements, banners, faqs, loan_offers, testimonials, cities, localities
  - newsletter_subscriptions, audit_logs

Enum types are named so Postgres creates real ENUM types; downgrade drops them.
"""
from alembic import op
import sqlalchemy as sa

revision = 'c3d4e5f6a7b8'
down_revision = None
branch_labels = None
depends_on = None

ENUMS = {
    'user_type': ('INDIVIDUAL', 'AGENT', 'BUILDER', 'ADMIN'),
    'otp_purpose': ('verify_email', 'forgot_password'),
    'project_status': ('ONGOING', 'COMPLETED', 'UPCOMING'),
    'property_type': ('APARTMENT', 'HOUSE', 'VILLA', 'PLOT', 'COMMERCIAL', 'PG', 'ROOMMATE'),
    'listing_type': ('SELL', 'RENT', 'PG', 'ROOMMATE'),
    'furnishing_type': ('FURNISHED', 'SEMI_FURNISHED', 'UNFURNISHED'),
    'property_status': ('PENDING', 'ACTIVE', 'SOLD', 'EXPIRED', 'REJECTED'),
    'listing_tier': ('BASIC', 'FEATURED', 'PREMIUM'),
    'inquiry_status': ('PENDING', 'RESPONDED', 'CLOSED'),
    'contact_message_status': ('NEW', 'READ', 'REPLIED'),
    'membership_status': ('ACTIVE', 'EXPIRED', 'CANCELLED'),
    'request_status': ('PENDING', 'APPROVED', 'REJECTED'),
    'transaction_type': ('MEMBERSHIP', 'LISTING_UPGRADE', 'FEATURED'),
    'transaction_status': ('PENDING', 'COMPLETED', 'FAILED', 'REFUNDED'),
    'ad_position': ('SIDEBAR', 'HEADER', 'FOOTER', 'INLINE'),
    'banner_position': ('HOT_ZONE', 'PRIME_ZONE', 'FEATURED_ZONE', 'HOME_BANNER'),
}


def enum(name: str) -> sa.Enum:
    return sa.Enum(*ENUMS[name], name=name)


def id_column() -> sa.Column:
    return sa.Column('id', sa.Uuid(), primary_key=True, nullable=False)


def created_at() -> sa.Column:
    return sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    # ── Accounts ──────────────────────────────────────────────────────────────
    op.create_table(
        'users',
        id_column(),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('avatar_url', sa.String(500), nullable=True),
        sa.Column('user_type', enum('user_type'), server_default='INDIVIDUAL', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('last_login_at', sa.TIMESTAMP(timezone=True), nullable=True),
        created_at(),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_user_type', 'users', ['user_type'])

    op.create_table(
        'agent_profiles',
        id_column(),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('agency_name', sa.String(200), nullable=True),
        sa.Column('license_number', sa.String(100), nullable=True),
        sa.Column('experience_years', sa.Integer(), nullable=True),
        sa.Column('specialization', sa.String(200), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('rating', sa.Float(), server_default='0', nullable=False),
        sa.Column('total_deals', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_verified', sa.Boolean(), server_default=sa.false(), nullable=False),
        created_at(),
    )
    op.create_index('ix_agent_profiles_user_id', 'agent_profiles', ['user_id'], unique=True)
    op.create_index('ix_agent_profiles_city', 'agent_profiles', ['city'])

    op.create_table(
        'builder_profiles',
        id_column(),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('company_name', sa.String(200), nullable=False),
        sa.Column('established_year', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('website', sa.String(500), nullable=True),
        sa.Column('logo_url', sa.String(500), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('is_verified', sa.Boolean(), server_default=sa.false(), nullable=False),
        created_at(),
    )
    op.create_index('ix_builder_profiles_user_id', 'builder_profiles', ['user_id'], unique=True)
    op.create_index('ix_builder_profiles_city', 'builder_profiles', ['city'])

    op.create_table(
        'otp_records',
        id_column(),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('otp_hash', sa.String(), nullable=False),
        sa.Column('purpose', enum('otp_purpose'), nullable=False),
        sa.Column('is_used', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('expires_at', sa.TIMESTAMP(timezone=True), nullable=False),
        created_at(),
    )
    op.create_index('ix_otp_records_user_id', 'otp_records', ['user_id'])
    op.create_index('ix_otp_records_email', 'otp_records', ['email'])

    # ── Listings ──────────────────────────────────────────────────────────────
    op.create_table(
        'projects',
        id_column(),
        sa.Column('builder_id', sa.Uuid(), sa.ForeignKey('builder_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', enum('project_status'), server_default='ONGOING', nullable=False),
        sa.Column('location', sa.String(500), nullable=False),
        sa.Column('city', sa.String(100), nullable=False),
        sa.Column('state', sa.String(100), nullable=False),
        sa.Column('start_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('completion_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('total_units', sa.Integer(), nullable=True),
        sa.Column('available_units', sa.Integer(), nullable=True),
        sa.Column('price_range', sa.String(100), nullable=True),
        sa.Column('amenities', sa.JSON(), nullable=True),
        sa.Column('images', sa.JSON(), nullable=True),
        sa.Column('is_featured', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('is_popular', sa.Boolean(), server_default=sa.false(), nullable=False),
        created_at(),
    )
    op.create_index('ix_projects_builder_id', 'projects', ['builder_id'])
    op.create_index('ix_projects_status', 'projects', ['status'])
    op.create_index('ix_projects_city', 'projects', ['city'])

    op.create_table(
        'properties',
        id_column(),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('project_id', sa.Uuid(), sa.ForeignKey('projects.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('property_type', enum('property_type'), nullable=False),
        sa.Column('listing_type', enum('listing_type'), nullable=False),
        sa.Column('address', sa.String(500), nullable=False),
        sa.Column('locality', sa.String(100), nullable=False),
        sa.Column('city', sa.String(100), nullable=False),
        sa.Column('state', sa.String(100), nullable=False),
        sa.Column('pincode', sa.String(10), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('bedrooms', sa.Integer(), nullable=True),
        sa.Column('bathrooms', sa.Integer(), nullable=True),
        sa.Column('balconies', sa.Integer(), nullable=True),
        sa.Column('floor_number', sa.Integer(), nullable=True),
        sa.Column('total_floors', sa.Integer(), nullable=True),
        sa.Column('facing', sa.String(50), nullable=True),
        sa.Column('furnishing', enum('furnishing_type'), nullable=True),
        sa.Column('built_up_area', sa.Float(), nullable=True),
        sa.Column('carpet_area', sa.Float(), nullable=True),
        sa.Column('plot_area', sa.Float(), nullable=True),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('price_per_sqft', sa.Float(), nullable=True),
        sa.Column('maintenance', sa.Float(), nullable=True),
        sa.Column('security_deposit', sa.Float(), nullable=True),
        sa.Column('images', sa.JSON(), nullable=True),
        sa.Column('video_url', sa.String(500), nullable=True),
        sa.Column('amenities', sa.JSON(), nullable=True),
        sa.Column('status', enum('property_status'), server_default='PENDING', nullable=False),
        sa.Column('listing_tier', enum('listing_tier'), server_default='BASIC', nullable=False),
        sa.Column('views', sa.Integer(), server_default='0', nullable=False),
        sa.Column('available_from', sa.TIMESTAMP(timezone=True), nullable=True),
        created_at(),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    for column in ('user_id', 'project_id', 'property_type', 'listing_type', 'locality',
                   'city', 'bedrooms', 'price', 'status', 'created_at'):
        op.create_index(f'ix_properties_{column}', 'properties', [column])

    op.create_table(
        'favorites',
        id_column(),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('property_id', sa.Uuid(), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False),
        created_at(),
        sa.UniqueConstraint('user_id', 'property_id', name='uq_favorites_user_property'),
    )
    op.create_index('ix_favorites_user_id', 'favorites', ['user_id'])
    op.create_index('ix_favorites_property_id', 'favorites', ['property_id'])

    # ── Messaging ─────────────────────────────────────────────────────────────
    op.create_table(
        'inquiries',
        id_column(),
        sa.Column('sender_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('receiver_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('property_id', sa.Uuid(), sa.ForeignKey('properties.id', ondelete='SET NULL'), nullable=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', enum('inquiry_status'), server_default='PENDING', nullable=False),
        created_at(),
    )
    for column in ('sender_id', 'receiver_id', 'property_id', 'created_at'):
        op.create_index(f'ix_inquiries_{column}', 'inquiries', [column])

    op.create_table(
        'contact_messages',
        id_column(),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('subject', sa.String(200), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', enum('contact_message_status'), server_default='NEW', nullable=False),
        created_at(),
    )
    op.create_index('ix_contact_messages_status', 'contact_messages', ['status'])

    op.create_table(
        'notifications',
        id_column(),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('link', sa.String(500), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('read', sa.Boolean(), server_default=sa.false(), nullable=False),
        created_at(),
    )
    for column in ('user_id', 'read', 'created_at'):
        op.create_index(f'ix_notifications_{column}', 'notifications', [column])

    # ── Memberships & payments ────────────────────────────────────────────────
    op.create_table(
        'membership_plans',
        id_column(),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('featured_listings', sa.Integer(), server_default='0', nullable=False),
        sa.Column('premium_listings', sa.Integer(), server_default='0', nullable=False),
        sa.Column('basic_listings', sa.Integer(), server_default='0', nullable=False),
        sa.Column('features', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        created_at(),
    )

    op.create_table(
        'memberships',
        id_column(),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('plan_id', sa.Uuid(), sa.ForeignKey('membership_plans.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('start_date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('end_date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('status', enum('membership_status'), server_default='ACTIVE', nullable=False),
        created_at(),
    )
    op.create_index('ix_memberships_user_id', 'memberships', ['user_id'], unique=True)

    op.create_table(
        'membership_requests',
        id_column(),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('plan_id', sa.Uuid(), sa.ForeignKey('membership_plans.id', ondelete='CASCADE'), nullable=False),
        sa.Column('current_plan', sa.String(100), nullable=True),
        sa.Column('requested_plan', sa.String(100), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('status', enum('request_status'), server_default='PENDING', nullable=False),
        created_at(),
    )
    op.create_index('ix_membership_requests_user_id', 'membership_requests', ['user_id'])
    op.create_index('ix_membership_requests_status', 'membership_requests', ['status'])

    op.create_table(
        'transactions',
        id_column(),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', enum('transaction_type'), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('currency', sa.String(3), server_default='INR', nullable=False),
        sa.Column('status', enum('transaction_status'), server_default='PENDING', nullable=False),
        sa.Column('payment_method', sa.String(50), nullable=True),
        sa.Column('transaction_id', sa.String(200), nullable=True),
        sa.Column('description', sa.String(500), nullable=True),
        created_at(),
    )
    for column in ('user_id', 'status', 'transaction_id'):
        op.create_index(f'ix_transactions_{column}', 'transactions', [column])

    # ── Site content ──────────────────────────────────────────────────────────
    op.create_table(
        'advertisements',
        id_column(),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('image_url', sa.String(500), nullable=False),
        sa.Column('link_url', sa.String(500), nullable=True),
        sa.Column('position', enum('ad_position'), nullable=False),
        sa.Column('start_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('end_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        created_at(),
    )
    op.create_index('ix_advertisements_position', 'advertisements', ['position'])

    op.create_table(
        'banners',
        id_column(),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('subtitle', sa.String(500), nullable=True),
        sa.Column('image_url', sa.String(500), nullable=False),
        sa.Column('link_url', sa.String(500), nullable=True),
        sa.Column('position', enum('banner_position'), nullable=False),
        sa.Column('order', sa.Integer(), server_default='0', nullable=False),
        sa.Column('start_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('end_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        created_at(),
    )
    op.create_index('ix_banners_position', 'banners', ['position'])

    op.create_table(
        'faqs',
        id_column(),
        sa.Column('question', sa.String(500), nullable=False),
        sa.Column('answer', sa.Text(), nullable=False),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('order', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        created_at(),
    )
    op.create_index('ix_faqs_category', 'faqs', ['category'])

    op.create_table(
        'loan_offers',
        id_column(),
        sa.Column('bank_name', sa.String(200), nullable=False),
        sa.Column('logo_url', sa.String(500), nullable=True),
        sa.Column('interest_rate', sa.Float(), nullable=False),
        sa.Column('max_amount', sa.Float(), nullable=True),
        sa.Column('min_amount', sa.Float(), nullable=True),
        sa.Column('max_tenure', sa.Integer(), nullable=True),
        sa.Column('processing_fee', sa.String(100), nullable=True),
        sa.Column('features', sa.Text(), nullable=True),
        sa.Column('link_url', sa.String(500), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        created_at(),
    )

    op.create_table(
        'testimonials',
        id_column(),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('role', sa.String(100), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('rating', sa.Integer(), server_default='5', nullable=False),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        created_at(),
    )

    op.create_table(
        'cities',
        id_column(),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('state', sa.String(100), nullable=False),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column('is_popular', sa.Boolean(), server_default=sa.false(), nullable=False),
        created_at(),
    )

    op.create_table(
        'localities',
        id_column(),
        sa.Column('city_id', sa.Uuid(), sa.ForeignKey('cities.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('pincode', sa.String(10), nullable=True),
        created_at(),
    )
    op.create_index('ix_localities_city_id', 'localities', ['city_id'])

    op.create_table(
        'newsletter_subscriptions',
        id_column(),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        created_at(),
    )
    op.create_index('ix_newsletter_subscriptions_email', 'newsletter_subscriptions', ['email'], unique=True)

    # ── Audit ─────────────────────────────────────────────────────────────────
    op.create_table(
        'audit_logs',
        id_column(),
        sa.Column('admin_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('action', sa.String(100), nullable=False),
        sa.Column('target_type', sa.String(50), nullable=True),
        sa.Column('target_id', sa.String(100), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        created_at(),
    )
    for column in ('admin_id', 'action', 'target_id', 'created_at'):
        op.create_index(f'ix_audit_logs_{column}', 'audit_logs', [column])


def downgrade() -> None:
    # Reverse dependency order
    for table in (
        'audit_logs', 'newsletter_subscriptions', 'localities', 'cities', 'testimonials',
        'loan_offers', 'faqs', 'banners', 'advertisements', 'transactions',
        'membership_requests', 'memberships', 'membership_plans', 'notifications',
        'contact_messages', 'inquiries', 'favorites', 'properties', 'projects',
        'otp_records', 'builder_profiles', 'agent_profiles', 'users',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for name in ENUMS:
        enum(name).drop(bind, checkfirst=True)
