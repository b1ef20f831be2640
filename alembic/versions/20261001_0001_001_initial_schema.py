"""Initial schema - users, agents, integrations, threads, knowledge_base

Revision ID: 001_initial
Revises: 
Create Date: 2026-10-01

Baseline tables as first created by setup_db. Later revisions add the
knowledge base search columns and the per-agent Google integration.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users table
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # Integrations table (before agents, which will reference it)
    op.create_table(
        'integrations',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('provider', sa.String(20), nullable=False),
        sa.Column('credentials', sa.Text, nullable=True),
        sa.Column('config', sa.JSON, nullable=True),
        sa.Column('is_active', sa.Boolean, server_default=sa.true(), nullable=False),
        sa.Column('last_used_at', sa.DateTime, nullable=True),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('integrations_user_provider_idx', 'integrations', ['user_id', 'provider'], unique=True)

    # Agents table
    op.create_table(
        'agents',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('system_prompt', sa.Text, server_default='', nullable=False),
        sa.Column('model_config', sa.JSON, nullable=True),
        sa.Column('enabled_tools', sa.JSON, nullable=True),
        sa.Column('company_profile', sa.Text, nullable=True),
        sa.Column('display_name', sa.String(100), nullable=True),
        sa.Column('personality', sa.Text, nullable=True),
        sa.Column('tone', sa.String(50), server_default='friendly'),
        sa.Column('use_emojis', sa.Boolean, server_default=sa.true(), nullable=False),
        sa.Column('language', sa.String(10), server_default='pt-BR'),
        sa.Column('is_active', sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column('is_default', sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_agents_user_id', 'agents', ['user_id'])
    op.create_index('ix_agents_is_active', 'agents', ['is_active'])

    # Threads table
    op.create_table(
        'threads',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('agent_id', sa.String(36), sa.ForeignKey('agents.id', ondelete='SET NULL'), nullable=True),
        sa.Column('external_id', sa.String(50), nullable=False),
        sa.Column('contact_name', sa.String(255), nullable=True),
        sa.Column('contact_email', sa.String(255), nullable=True),
        sa.Column('status', sa.String(20), server_default='active', nullable=False),
        sa.Column('message_count', sa.Integer, server_default='0', nullable=False),
        sa.Column('first_interaction_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('last_interaction_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_threads_user_id', 'threads', ['user_id'])
    op.create_index('ix_threads_status', 'threads', ['status'])
    op.create_index('ix_threads_last_interaction_at', 'threads', ['last_interaction_at'])
    op.create_index('threads_external_id_idx', 'threads', ['user_id', 'external_id'], unique=True)

    # Knowledge base (search columns and embedding come in 002)
    op.create_table(
        'knowledge_base',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('agent_id', sa.String(36), sa.ForeignKey('agents.id', ondelete='CASCADE'), nullable=True),
        sa.Column('topic', sa.String(255), nullable=False),
        sa.Column('content', sa.Text, nullable=False),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table('knowledge_base')
    op.drop_table('threads')
    op.drop_table('agents')
    op.drop_table('integrations')
    op.drop_table('users')
