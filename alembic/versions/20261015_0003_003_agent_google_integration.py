"""003 - Per-agent Google integration

Revision ID: 003_agent_google_integration
Revises: 002_knowledge_search
Create Date: 2026-10-15

An agent either pins its own Google integration or uses the user's main one.
"""

from alembic import op

# revision identifiers
revision = '003_agent_google_integration'
down_revision = '002_knowledge_search'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("""
        ALTER TABLE agents
        ADD COLUMN IF NOT EXISTS google_integration_id VARCHAR(36)
        REFERENCES integrations(id) ON DELETE SET NULL
    """)
    op.execute("ALTER TABLE agents ADD COLUMN IF NOT EXISTS use_main_google_integration BOOLEAN DEFAULT TRUE")


def downgrade() -> None:
    op.execute("ALTER TABLE agents DROP COLUMN IF EXISTS use_main_google_integration")
    op.execute("ALTER TABLE agents DROP COLUMN IF EXISTS google_integration_id")
