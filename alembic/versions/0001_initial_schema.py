"""initial schema: users, categories, amenities, properties

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None

property_purpose = sa.Enum('rent', 'sale', name='property_purpose')
category_type = sa.Enum('residential', 'commercial', name='category_type')
rent_frequency = sa.Enum('yearly', 'monthly', 'weekly', 'daily', name='rent_frequency')
completion_status = sa.Enum('ready', 'off_plan', name='completion_status')
urgency = sa.Enum('this_month', 'within_2_months', 'flexible', name='urgency')
ownership_type = sa.Enum('freehold', 'leasehold', name='ownership_type')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('is_email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('email_otp_hash', sa.String(), nullable=True),
        sa.Column('email_otp_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('email_otp_attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reset_password_token_hash', sa.String(), nullable=True),
        sa.Column('reset_password_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'categories',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('type', category_type, nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_categories_type', 'categories', ['type'])

    op.create_table(
        'sub_categories',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('category_id', sa.String(), sa.ForeignKey('categories.id', ondelete='CASCADE'), nullable=False),
        sa.UniqueConstraint('category_id', 'name', name='uq_sub_category_name'),
    )
    op.create_index('ix_sub_categories_category_id', 'sub_categories', ['category_id'])

    op.create_table(
        'amenities',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False, unique=True),
    )

    op.create_table(
        'properties',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('owner_id', sa.String(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('purpose', property_purpose, nullable=False),
        sa.Column('category_id', sa.String(), sa.ForeignKey('categories.id'), nullable=False),
        sa.Column('sub_category_id', sa.String(), sa.ForeignKey('sub_categories.id'), nullable=True),
        sa.Column('reference_no', sa.String(), nullable=True),
        sa.Column('completion', completion_status, nullable=True),
        sa.Column('tru_check_on', sa.DateTime(timezone=True), nullable=True),
        sa.Column('handover_date', sa.String(), nullable=True),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('bedrooms', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('bathrooms', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('area_sqft', sa.Integer(), nullable=False),
        sa.Column('rent_frequency', rent_frequency, nullable=True),
        sa.Column('furnished', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('city', sa.String(), nullable=False),
        sa.Column('community', sa.String(), nullable=False),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('urgency', urgency, nullable=True),
        sa.Column('developer_name', sa.String(), nullable=True),
        sa.Column('ownership', ownership_type, nullable=True),
        sa.Column('balcony_size_sqft', sa.Integer(), nullable=True),
        sa.Column('parking_available', sa.Boolean(), nullable=True),
        sa.Column('building_name', sa.String(), nullable=True),
        sa.Column('total_floors', sa.Integer(), nullable=True),
        sa.Column('swimming_pools', sa.Integer(), nullable=True),
        sa.Column('total_parking_spaces', sa.Integer(), nullable=True),
        sa.Column('total_building_area_sqft', sa.Integer(), nullable=True),
        sa.Column('elevators', sa.Integer(), nullable=True),
        sa.Column('contact_name', sa.String(), nullable=True),
        sa.Column('contact_email', sa.String(), nullable=True),
        sa.Column('contact_phone', sa.String(), nullable=True),
        sa.Column('cover_image_url', sa.String(), nullable=False),
        sa.Column('image_urls', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_properties_owner_id', 'properties', ['owner_id'])
    op.create_index('ix_properties_purpose', 'properties', ['purpose'])
    op.create_index('ix_properties_category_id', 'properties', ['category_id'])
    op.create_index('ix_properties_sub_category_id', 'properties', ['sub_category_id'])
    op.create_index('ix_properties_price', 'properties', ['price'])
    op.create_index('ix_properties_city', 'properties', ['city'])
    op.create_index('ix_properties_community', 'properties', ['community'])
    op.create_index('ix_properties_created_at', 'properties', ['created_at'])
    op.create_index('idx_property_purpose_city', 'properties', ['purpose', 'city'])
    op.create_index('idx_property_purpose_created', 'properties', ['purpose', 'created_at'])

    op.create_table(
        'property_amenities',
        sa.Column('property_id', sa.String(), sa.ForeignKey('properties.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('amenity_id', sa.String(), sa.ForeignKey('amenities.id', ondelete='CASCADE'), primary_key=True),
    )


def downgrade() -> None:
    op.drop_table('property_amenities')
    op.drop_table('properties')
    op.drop_table('amenities')
    op.drop_table('sub_categories')
    op.drop_table('categories')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (ownership_type, urgency, completion_status, rent_frequency, category_type, property_purpose):
        enum_type.drop(bind, checkfirst=True)
