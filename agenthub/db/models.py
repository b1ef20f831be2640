"""
Database models for AgentHub

Entities:
- users: platform administrators
- agents: AI agent configuration
- integrations: third-party credentials (Google, WhatsApp, ...)
- threads: one conversation per external contact
- knowledge_base: agent knowledge with vector embeddings
"""

from datetime import datetime
from typing import Optional, List
from enum import Enum
import uuid

from sqlalchemy import (
    String, Text, DateTime, Integer, Boolean, ForeignKey, JSON, Index
)
from sqlalchemy.orm import declarative_base, relationship, Mapped, mapped_column
from pgvector.sqlalchemy import Vector

EMBEDDING_DIMENSION = 1536

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


class ThreadStatus(str, Enum):
    """Status of a conversation thread"""
    PENDING = "pending"       # Waiting on the contact
    ACTIVE = "active"         # Ongoing conversation
    QUALIFIED = "qualified"   # Lead qualified
    BOOKED = "booked"         # Meeting booked
    CLOSED = "closed"         # Finished
    ARCHIVED = "archived"     # Archived for inactivity


class IntegrationProvider(str, Enum):
    """Supported integration providers"""
    GOOGLE = "google"         # Google Calendar + Sheets
    WHATSAPP = "whatsapp"     # WhatsApp instance
    META = "meta"             # WhatsApp Business API
    OPENAI = "openai"         # Additional AI models


class ContentType(str, Enum):
    """How a knowledge entry was authored"""
    TEXT = "text"
    FAQ = "faq"
    FILE = "file"


class User(Base):
    """Platform user (administrator)"""
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    agents: Mapped[List["Agent"]] = relationship("Agent", back_populates="user", passive_deletes=True)
    integrations: Mapped[List["Integration"]] = relationship("Integration", back_populates="user", passive_deletes=True)


class Agent(Base):
    """AI agent configuration"""
    __tablename__ = "agents"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True)

    # Identity
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # internal, not used in prompts
    system_prompt: Mapped[str] = mapped_column(Text, default="")
    model_config_json: Mapped[Optional[dict]] = mapped_column("model_config", JSON, nullable=True)
    enabled_tools: Mapped[Optional[list]] = mapped_column(JSON, default=list)
    company_profile: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Personality
    display_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    personality: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tone: Mapped[Optional[str]] = mapped_column(String(50), default="friendly")
    use_emojis: Mapped[bool] = mapped_column(Boolean, default=True)
    language: Mapped[Optional[str]] = mapped_column(String(10), default="pt-BR")

    # Status
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False)

    # Google integration: either a dedicated one or the user's main one
    google_integration_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("integrations.id", ondelete="SET NULL"), nullable=True
    )
    use_main_google_integration: Mapped[bool] = mapped_column(Boolean, default=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="agents")
    google_integration: Mapped[Optional["Integration"]] = relationship("Integration")
    knowledge: Mapped[List["KnowledgeBase"]] = relationship(
        "KnowledgeBase", back_populates="agent", passive_deletes=True
    )


class Integration(Base):
    """
    Third-party integration credentials.
    Deactivated with is_active=False, never deleted, so history is kept.
    """
    __tablename__ = "integrations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"))
    provider: Mapped[str] = mapped_column(String(20))  # IntegrationProvider enum value

    credentials: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # opaque JSON blob
    config: Mapped[Optional[dict]] = mapped_column(JSON, default=dict)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    last_used_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user: Mapped["User"] = relationship("User", back_populates="integrations")

    __table_args__ = (
        Index("integrations_user_provider_idx", "user_id", "provider", unique=True),
    )


class Thread(Base):
    """A conversation with one external contact (e.g. a phone number)"""
    __tablename__ = "threads"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True)
    agent_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("agents.id", ondelete="SET NULL"), nullable=True
    )

    # Contact
    external_id: Mapped[str] = mapped_column(String(50))
    contact_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    status: Mapped[str] = mapped_column(String(20), default=ThreadStatus.ACTIVE.value, index=True)
    message_count: Mapped[int] = mapped_column(Integer, default=0)

    # Interaction timestamps
    first_interaction_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    last_interaction_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("threads_external_id_idx", "user_id", "external_id", unique=True),
    )


class KnowledgeBase(Base):
    """
    Knowledge entry for an agent.
    agent_id NULL means global knowledge, visible to every agent.
    The embedding is always computed from the content stored alongside it.
    """
    __tablename__ = "knowledge_base"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    agent_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("agents.id", ondelete="CASCADE"), nullable=True
    )

    # Content
    topic: Mapped[str] = mapped_column(String(255))  # e.g. "Pricing", "FAQ"
    content: Mapped[str] = mapped_column(Text)
    content_type: Mapped[str] = mapped_column(String(20), default=ContentType.TEXT.value)

    # Search helpers
    keywords: Mapped[Optional[list]] = mapped_column(JSON, default=list)
    priority: Mapped[int] = mapped_column(Integer, default=0)  # higher = injected first
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    metadata_json: Mapped[Optional[dict]] = mapped_column("metadata", JSON, default=dict)

    # Native pgvector column
    embedding = mapped_column(Vector(EMBEDDING_DIMENSION), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    agent: Mapped[Optional["Agent"]] = relationship("Agent", back_populates="knowledge")

    __table_args__ = (
        Index("knowledge_agent_id_idx", "agent_id"),
        Index("knowledge_agent_topic_idx", "agent_id", "topic"),
    )
