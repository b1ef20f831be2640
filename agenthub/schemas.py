"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from agenthub.db.models import ThreadStatus, ContentType


class CamelModel(BaseModel):
    """Base for payloads consumed by the dashboard UI (camelCase keys)"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ============ Action results ============

class ActionResult(BaseModel):
    """Uniform result of a server action"""
    success: bool
    error: Optional[str] = None


class IntegrationsStatus(BaseModel):
    """Presence flag per provider"""
    google: bool = False
    whatsapp: bool = False


# ============ Threads ============

class ThreadSummary(CamelModel):
    id: str
    contact_name: Optional[str] = None
    contact_phone: str
    last_message: Optional[str] = None
    status: ThreadStatus = ThreadStatus.PENDING
    message_count: int = 0
    last_interaction_at: datetime


class ThreadListResponse(BaseModel):
    threads: List[ThreadSummary]


# ============ Integrations ============

class ProviderStatus(BaseModel):
    connected: bool = False
    email: Optional[str] = None
    id: Optional[str] = None


class IntegrationsStatusResponse(CamelModel):
    user_id: Optional[str] = None
    google: ProviderStatus = Field(default_factory=ProviderStatus)
    whatsapp: ProviderStatus = Field(default_factory=ProviderStatus)


class DisconnectResponse(BaseModel):
    success: bool = True


# ============ Agents ============

class AgentUpdate(CamelModel):
    """Partial agent update. Only fields that are set are written."""
    name: Optional[str] = None
    description: Optional[str] = None
    system_prompt: Optional[str] = None
    company_profile: Optional[str] = None
    enabled_tools: Optional[List[str]] = None
    display_name: Optional[str] = None
    personality: Optional[str] = None
    tone: Optional[str] = None
    use_emojis: Optional[bool] = None
    language: Optional[str] = None
    is_active: Optional[bool] = None
    google_integration_id: Optional[str] = None
    use_main_google_integration: Optional[bool] = None

    @model_validator(mode="after")
    def check_google_integration(self) -> "AgentUpdate":
        if self.google_integration_id and self.use_main_google_integration:
            raise ValueError(
                "An agent cannot use both its own Google integration and the main one"
            )
        if self.use_main_google_integration is False and not self.google_integration_id:
            raise ValueError(
                "An agent must pin a Google integration to stop using the main one"
            )
        return self


class AgentResponse(CamelModel):
    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    display_name: Optional[str] = None
    tone: Optional[str] = None
    language: Optional[str] = None
    is_active: bool
    is_default: bool
    google_integration_id: Optional[str] = None
    use_main_google_integration: bool = True
    created_at: datetime
    updated_at: datetime


# ============ Knowledge base ============

class KnowledgeCreate(CamelModel):
    topic: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    content_type: ContentType = ContentType.TEXT
    priority: int = 0
    metadata: Dict[str, Any] = Field(default_factory=dict)


class KnowledgeResponse(CamelModel):
    id: str
    agent_id: Optional[str] = None
    topic: str
    content: str
    content_type: str
    keywords: List[str] = Field(default_factory=list)
    priority: int = 0
    is_active: bool = True
    has_embedding: bool = False
    created_at: datetime

    @classmethod
    def from_row(cls, row) -> "KnowledgeResponse":
        return cls(
            id=row.id,
            agent_id=row.agent_id,
            topic=row.topic,
            content=row.content,
            content_type=row.content_type,
            keywords=row.keywords or [],
            priority=row.priority,
            is_active=row.is_active,
            has_embedding=row.embedding is not None,
            created_at=row.created_at,
        )
