"""
Tests for the knowledge base: embeddings, visibility, search and import
"""

from types import SimpleNamespace

import pytest

from agenthub.actions.knowledge import add_knowledge_action, remove_knowledge_action
from agenthub.db import ContentType
from agenthub.errors import EmbeddingDimensionError
from agenthub.queries.agents import create_agent
from agenthub.queries.knowledge import count_knowledge, get_knowledge, list_knowledge, search_knowledge
from agenthub.schemas import KnowledgeCreate
from agenthub.scripts.import_knowledge import import_knowledge
from agenthub.services.embedding_service import EmbeddingService
from agenthub.services.knowledge_service import (
    MAX_KEYWORDS, KnowledgeService, extract_keywords, format_context_with_xml, split_markdown_by_headers,
)

from conftest import FakeEmbeddingService

FAQ_MARKDOWN = """Introdução ao atendimento.

## Preços
Plano básico custa R$ 99 por mês.

## Horários
Atendemos de segunda a sexta.

## Vazio
"""


# ============ Helpers ============

def test_split_markdown_by_headers():
    chunks = split_markdown_by_headers(FAQ_MARKDOWN)

    assert [c.topic for c in chunks] == ["Section 1", "Preços", "Horários"]
    assert chunks[1].content == "Plano básico custa R$ 99 por mês."
    assert [c.order for c in chunks] == [0, 1, 2]


def test_extract_keywords_drops_stopwords_and_duplicates():
    keywords = extract_keywords("O plano **básico** de vendas e o plano premium para vendas")
    assert keywords == ["plano", "básico", "vendas", "premium"]


def test_extract_keywords_is_capped():
    text = " ".join(f"palavra{i}" for i in range(50))
    assert len(extract_keywords(text)) == MAX_KEYWORDS


def test_format_context_with_xml():
    assert format_context_with_xml([]) == ""
    context = format_context_with_xml(["um", "dois"])
    assert context.startswith("<context>")
    assert context.count("<knowledge>") == 2


def test_embedding_dimension_is_checked():
    with pytest.raises(EmbeddingDimensionError) as exc_info:
        EmbeddingService().check_dimension([0.1] * 3)
    assert exc_info.value.expected == 1536
    assert exc_info.value.actual == 3


# ============ Writes ============

@pytest.mark.asyncio
async def test_add_knowledge_embeds_content(db_session, agent, knowledge_service, embedder):
    data = KnowledgeCreate(topic="Preços", content="Plano básico custa R$ 99", priority=2)
    item = await knowledge_service.add_knowledge(db_session, agent.id, data)

    assert embedder.calls == ["Plano básico custa R$ 99"]
    stored = await get_knowledge(db_session, item.id)
    assert stored.embedding is not None
    assert len(stored.embedding) == 1536
    assert stored.content_type == ContentType.TEXT.value
    assert "plano" in stored.keywords
    assert stored.metadata_json["original_length"] == len(data.content)


@pytest.mark.asyncio
async def test_update_content_re_embeds(db_session, agent, knowledge_service, embedder):
    item = await knowledge_service.add_knowledge(
        db_session, agent.id, KnowledgeCreate(topic="Preços", content="R$ 99")
    )
    updated = await knowledge_service.update_content(db_session, item, "R$ 129")

    assert embedder.calls == ["R$ 99", "R$ 129"]
    assert updated.content == "R$ 129"
    assert updated.metadata_json["original_length"] == len("R$ 129")


class _ShortVectorClient:
    """Stands in for the OpenAI client, returning 3-dimensional vectors"""

    def __init__(self):
        self.embeddings = self

    def create(self, model, input):
        texts = input if isinstance(input, list) else [input]
        data = [SimpleNamespace(index=i, embedding=[0.1] * 3) for i in range(len(texts))]
        return SimpleNamespace(data=list(reversed(data)))


@pytest.mark.asyncio
async def test_wrong_dimension_is_rejected(db_session, agent, monkeypatch):
    monkeypatch.setattr(EmbeddingService, "_openai_client", _ShortVectorClient())
    service = KnowledgeService(embedding_service=EmbeddingService())

    with pytest.raises(EmbeddingDimensionError):
        await service.add_knowledge(db_session, agent.id, KnowledgeCreate(topic="x", content="y"))
    assert await count_knowledge(db_session, agent.id) == 0


def test_embed_batch_checks_every_vector(monkeypatch):
    monkeypatch.setattr(EmbeddingService, "_openai_client", _ShortVectorClient())
    assert EmbeddingService().embed_batch([]) == []
    with pytest.raises(EmbeddingDimensionError):
        EmbeddingService().embed_batch(["a", "b"])


@pytest.mark.asyncio
async def test_add_and_remove_actions(db_session, agent, knowledge_service):
    result = await add_knowledge_action(
        db_session, agent.id, KnowledgeCreate(topic="FAQ", content="Sim"), knowledge_service=knowledge_service
    )
    assert result.success is True

    items = await list_knowledge(db_session, agent.id)
    assert len(items) == 1

    result = await remove_knowledge_action(db_session, items[0].id, agent.id)
    assert result.success is True
    assert await list_knowledge(db_session, agent.id) == []


@pytest.mark.asyncio
async def test_remove_action_only_deletes_own_entries(db_session, user_id, agent, knowledge_service):
    other = await create_agent(db_session, user_id, "Suporte")
    foreign = await knowledge_service.add_knowledge(db_session, other.id, KnowledgeCreate(topic="FAQ", content="Sim"))
    shared = await knowledge_service.add_knowledge(db_session, None, KnowledgeCreate(topic="Empresa", content="2010"))
    foreign_id, shared_id = foreign.id, shared.id

    assert (await remove_knowledge_action(db_session, foreign_id, agent.id)).success is True
    assert (await remove_knowledge_action(db_session, shared_id, agent.id)).success is True

    assert await get_knowledge(db_session, foreign_id) is not None
    assert await get_knowledge(db_session, shared_id) is not None


@pytest.mark.asyncio
async def test_add_action_reports_embedding_failure(db_session, agent):
    service = KnowledgeService(embedding_service=FakeEmbeddingService(fail_on="boom"))
    result = await add_knowledge_action(
        db_session, agent.id, KnowledgeCreate(topic="FAQ", content="boom"), knowledge_service=service
    )
    assert result.success is False
    assert result.error == "Failed to add knowledge"


# ============ Reads ============

@pytest.mark.asyncio
async def test_global_knowledge_visible_to_every_agent(db_session, agent, knowledge_service):
    await knowledge_service.add_knowledge(db_session, None, KnowledgeCreate(topic="Empresa", content="Fundada em 2010"))
    await knowledge_service.add_knowledge(db_session, agent.id, KnowledgeCreate(topic="Preços", content="R$ 99", priority=5))

    visible = await list_knowledge(db_session, agent.id)
    assert [i.topic for i in visible] == ["Preços", "Empresa"]

    own = await list_knowledge(db_session, agent.id, include_global=False)
    assert [i.topic for i in own] == ["Preços"]

    global_only = await list_knowledge(db_session, None)
    assert [i.topic for i in global_only] == ["Empresa"]
    assert await count_knowledge(db_session, agent.id) == 1


@pytest.mark.asyncio
async def test_search_knowledge(db_session, agent, knowledge_service):
    await knowledge_service.add_knowledge(db_session, agent.id, KnowledgeCreate(topic="Preços", content="Plano básico"))
    await knowledge_service.add_knowledge(db_session, agent.id, KnowledgeCreate(topic="Horários", content="Seg a sex"))
    hidden = await knowledge_service.add_knowledge(
        db_session, agent.id, KnowledgeCreate(topic="Plano antigo", content="Descontinuado")
    )
    hidden.is_active = False
    await db_session.commit()

    results = await search_knowledge(db_session, agent.id, "plano")
    assert [i.topic for i in results] == ["Preços"]

    context = await knowledge_service.build_context(db_session, agent.id, "plano")
    assert "## Preços" in context


# ============ Import ============

@pytest.mark.asyncio
async def test_import_directory_one_entry_per_file(db_session, agent, knowledge_service, tmp_path):
    (tmp_path / "precos.txt").write_text("Plano básico custa R$ 99", encoding="utf-8")
    (tmp_path / "faq.md").write_text("Perguntas frequentes", encoding="utf-8")
    (tmp_path / "ignored.pdf").write_bytes(b"%PDF")

    report = await knowledge_service.import_directory(db_session, tmp_path, agent_id=agent.id)

    assert report.succeeded == 2
    assert report.failed == 0
    topics = sorted(i.topic for i in await list_knowledge(db_session, agent.id))
    assert topics == ["faq", "precos"]


@pytest.mark.asyncio
async def test_import_isolates_failures(db_session, agent, tmp_path):
    agent_id = agent.id  # the session is rolled back on each failed entry
    (tmp_path / "a.txt").write_text("conteúdo válido", encoding="utf-8")
    (tmp_path / "b.txt").write_text("boom", encoding="utf-8")
    (tmp_path / "c.txt").write_text("   ", encoding="utf-8")
    (tmp_path / "d.txt").write_text("outro conteúdo", encoding="utf-8")
    service = KnowledgeService(embedding_service=FakeEmbeddingService(fail_on="boom"))

    report = await service.import_directory(db_session, tmp_path, agent_id=agent_id)

    assert report.succeeded == 2
    assert report.failed == 2
    assert set(report.errors) == {"b.txt", "c.txt"}
    assert await count_knowledge(db_session, agent_id) == 2


@pytest.mark.asyncio
async def test_import_knowledge_script_splits_headers(engine, db_session, knowledge_service, tmp_path):
    (tmp_path / "faq.md").write_text(FAQ_MARKDOWN, encoding="utf-8")

    report = await import_knowledge(tmp_path, split_headers=True, engine=engine, knowledge_service=knowledge_service)

    assert report.succeeded == 3
    items = await list_knowledge(db_session, None)
    assert sorted(i.topic for i in items) == ["Horários", "Preços", "Section 1"]
    assert all(i.content_type == ContentType.FILE.value for i in items)
    assert all(i.metadata_json["source_file"] == "faq.md" for i in items)
