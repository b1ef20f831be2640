"""002 - pgvector embedding and knowledge base search columns

Revision ID: 002_knowledge_search
Revises: 001_initial
Create Date: 2026-10-08

Adds the native vector(1536) embedding plus content_type, metadata,
keywords, priority and is_active. IF NOT EXISTS keeps it safe on databases
already patched by the add_embedding / migrate_tables scripts.
"""

from alembic import op

# revision identifiers
revision = '002_knowledge_search'
down_revision = '001_initial'
branch_labels = None
depends_on = None


def upgrade() -> None:
    # 1. Enable pgvector extension (idempotent)
    op.execute("CREATE EXTENSION IF NOT EXISTS vector")

    # 2. Native embedding column, same dimension as text-embedding-3-small
    op.execute("ALTER TABLE knowledge_base ADD COLUMN IF NOT EXISTS embedding vector(1536)")

    # 3. Search and ordering columns
    op.execute("ALTER TABLE knowledge_base ADD COLUMN IF NOT EXISTS content_type VARCHAR(20) DEFAULT 'text'")
    op.execute("ALTER TABLE knowledge_base ADD COLUMN IF NOT EXISTS metadata JSON DEFAULT '{}'")
    op.execute("ALTER TABLE knowledge_base ADD COLUMN IF NOT EXISTS keywords JSON DEFAULT '[]'")
    op.execute("ALTER TABLE knowledge_base ADD COLUMN IF NOT EXISTS priority INTEGER DEFAULT 0 NOT NULL")
    op.execute("ALTER TABLE knowledge_base ADD COLUMN IF NOT EXISTS is_active BOOLEAN DEFAULT TRUE NOT NULL")

    # 4. Lookup indexes
    op.execute("CREATE INDEX IF NOT EXISTS knowledge_agent_id_idx ON knowledge_base (agent_id)")
    op.execute("CREATE INDEX IF NOT EXISTS knowledge_agent_topic_idx ON knowledge_base (agent_id, topic)")


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS knowledge_agent_topic_idx")
    op.execute("DROP INDEX IF EXISTS knowledge_agent_id_idx")
    for column in ("is_active", "priority", "keywords", "metadata", "content_type", "embedding"):
        op.execute(f"ALTER TABLE knowledge_base DROP COLUMN IF EXISTS {column}")
    # The vector extension is left in place
