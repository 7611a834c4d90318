"""Initial schema

Revision ID: 001
Revises: 
Create Date: 2026-01-05 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None

USER_ROLES = ('projectra_admin', 'admin', 'project_manager', 'team_leader', 'member', 'client', 'guest')


def upgrade() -> None:
    # Organizations table
    op.create_table(
        'organizations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    # Users table (org_id is null for platform admins)
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('org_id', sa.Uuid(), nullable=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', sa.Enum(*USER_ROLES, name='userrole', native_enum=False), nullable=False, server_default='member'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['org_id'], ['organizations.id'], ),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_org_id', 'users', ['org_id'])

    # System features table
    op.create_table(
        'system_features',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('display_name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column(
            'category',
            sa.Enum('core', 'collaboration', 'analytics', 'integration', 'ai', 'security', name='featurecategory', native_enum=False),
            nullable=False,
            server_default='core',
        ),
        sa.Column('is_enabled', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('is_premium', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('pricing_monthly', sa.Float(), nullable=False, server_default='0'),
        sa.Column('pricing_yearly', sa.Float(), nullable=False, server_default='0'),
        sa.Column('permission_roles', sa.JSON(), nullable=False),
        sa.Column('permission_organizations', sa.JSON(), nullable=False),
        sa.Column('configuration', sa.JSON(), nullable=False),
        sa.Column('dependencies', sa.JSON(), nullable=False),
        sa.Column('version', sa.String(), nullable=False, server_default='1.0.0'),
        sa.Column('last_updated', sa.DateTime(), nullable=False),
        sa.Column('created_by', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ),
    )
    op.create_index('ix_system_features_name', 'system_features', ['name'], unique=True)
    op.create_index('ix_system_features_category', 'system_features', ['category'])
    op.create_index('ix_system_features_is_enabled', 'system_features', ['is_enabled'])

    # Audit log for feature catalog changes
    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column(
            'action',
            sa.Enum('create_feature', 'update_feature', 'enable_feature', 'disable_feature', 'delete_feature',
                    name='auditaction', native_enum=False),
            nullable=False,
        ),
        sa.Column('resource', sa.String(), nullable=False),
        sa.Column('resource_id', sa.String(), nullable=True),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_audit_logs_user_id', 'audit_logs', ['user_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'])


def downgrade() -> None:
    op.drop_table('audit_logs')
    op.drop_table('system_features')
    op.drop_table('users')
    op.drop_table('organizations')
