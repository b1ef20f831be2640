"""
Knowledge service for AgentHub

- Adds knowledge entries with embeddings computed from the stored content
- Re-embeds on content change
- Imports extracted text files into the knowledge base
- Markdown chunking by H2 headers, keyword extraction, XML context formatting
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from agenthub.db.models import ContentType, KnowledgeBase
from agenthub.queries import knowledge as knowledge_queries
from agenthub.schemas import KnowledgeCreate
from agenthub.services.document_service import IngestionReport

logger = logging.getLogger(__name__)

MAX_KEYWORDS = 20

# Portuguese stopwords, the knowledge base is authored in pt-BR
STOPWORDS = frozenset({
    'de', 'a', 'o', 'que', 'e', 'do', 'da', 'em', 'um', 'para', 'é',
    'com', 'não', 'uma', 'os', 'no', 'se', 'na', 'por', 'mais', 'as',
    'dos', 'como', 'mas', 'foi', 'ao', 'ele', 'das', 'tem', 'à', 'seu',
    'sua', 'ou', 'ser', 'quando', 'muito', 'há', 'nos', 'já', 'está',
    'eu', 'também', 'só', 'pelo', 'pela', 'até', 'isso', 'ela', 'entre',
})


@dataclass
class KnowledgeChunk:
    topic: str
    content: str
    order: int


def split_markdown_by_headers(text: str) -> List[KnowledgeChunk]:
    """Split Markdown into one chunk per ``## `` section.

    Text before the first header becomes ``Section 1``; sections with no body
    are dropped.
    """
    normalized = text.replace("\r\n", "\n")
    chunks = []
    for index, section in enumerate(re.split(r"(?=^## )", normalized, flags=re.MULTILINE)):
        section = section.strip()
        if not section:
            continue
        header = re.search(r"^## (.+)$", section, flags=re.MULTILINE)
        topic = header.group(1).strip() if header else f"Section {index + 1}"
        content = re.sub(r"^## .+$", "", section, count=1, flags=re.MULTILINE).strip()
        if content:
            chunks.append(KnowledgeChunk(topic=topic, content=content, order=index))
    return chunks


def extract_keywords(text: str) -> List[str]:
    """Unique lowercase words of 3+ characters, minus stopwords, in order of appearance."""
    clean = re.sub(r"[#*_`~\[\](){}]", " ", text)
    clean = re.sub(r"\s+", " ", clean).lower()
    keywords: List[str] = []
    for word in clean.split(" "):
        if len(word) >= 3 and word not in STOPWORDS and word not in keywords:
            keywords.append(word)
            if len(keywords) == MAX_KEYWORDS:
                break
    return keywords


def format_context_with_xml(chunks: List[str]) -> str:
    """Wrap knowledge snippets in <context>/<knowledge> tags for prompt injection."""
    if not chunks:
        return ""
    body = "\n\n".join(f"<knowledge>\n{chunk}\n</knowledge>" for chunk in chunks)
    return f"<context>\n{body}\n</context>"


class KnowledgeService:
    """Writes knowledge entries so the embedding always matches the stored content"""

    def __init__(self, embedding_service=None):
        if embedding_service is None:
            from agenthub.services.embedding_service import get_embedding_service
            embedding_service = get_embedding_service()
        self.embedding_service = embedding_service

    async def embed(self, content: str) -> List[float]:
        # The OpenAI client is blocking
        return await asyncio.to_thread(self.embedding_service.embed, content)

    async def add_knowledge(
        self,
        db: AsyncSession,
        agent_id: Optional[str],
        data: KnowledgeCreate,
    ) -> KnowledgeBase:
        embedding = await self.embed(data.content)
        metadata = {
            **data.metadata,
            "original_length": len(data.content),
            "embedded_at": datetime.utcnow().isoformat(),
        }
        item = await knowledge_queries.create_knowledge(
            db,
            agent_id=agent_id,
            topic=data.topic,
            content=data.content,
            embedding=embedding,
            content_type=ContentType(data.content_type).value,
            keywords=extract_keywords(data.content),
            priority=data.priority,
            metadata=metadata,
        )
        logger.info(f"Added knowledge '{item.topic}' ({item.id}) for agent {agent_id or 'global'}")
        return item

    async def update_content(self, db: AsyncSession, item: KnowledgeBase, content: str) -> KnowledgeBase:
        """Replace content and recompute its embedding in the same write."""
        embedding = await self.embed(content)
        metadata = dict(item.metadata_json or {})
        metadata.update(original_length=len(content), embedded_at=datetime.utcnow().isoformat())
        return await knowledge_queries.update_knowledge(
            db, item,
            content=content,
            embedding=embedding,
            keywords=extract_keywords(content),
            metadata_json=metadata,
        )

    async def build_context(self, db: AsyncSession, agent_id: str, term: str, limit: int = 5) -> str:
        items = await knowledge_queries.search_knowledge(db, agent_id, term, limit=limit)
        return format_context_with_xml([f"## {item.topic}\n{item.content}" for item in items])

    async def import_directory(
        self,
        db: AsyncSession,
        directory: Union[str, Path],
        agent_id: Optional[str] = None,
        split_headers: bool = False,
        content_type: ContentType = ContentType.FILE,
    ) -> IngestionReport:
        """
        Import every .txt/.md file in a directory as knowledge.

        One entry per file (topic = file name), or one per ``## `` section with
        split_headers. Failures are isolated per entry.
        """
        report = IngestionReport()
        paths = sorted(
            p for p in Path(directory).iterdir()
            if p.is_file() and p.suffix.lower() in (".txt", ".md", ".markdown")
        )
        for path in paths:
            try:
                text = path.read_text(encoding="utf-8")
                if split_headers:
                    chunks = split_markdown_by_headers(text)
                else:
                    chunks = [KnowledgeChunk(topic=path.stem, content=text.strip(), order=0)]
                if not chunks or not any(c.content for c in chunks):
                    raise ValueError("document has no content")
            except Exception as e:
                logger.warning(f"Could not read {path.name}: {e}")
                report.record_failure(path.name, e)
                continue

            for chunk in chunks:
                label = f"{path.name}#{chunk.topic}" if split_headers else path.name
                try:
                    item = await self.add_knowledge(
                        db,
                        agent_id,
                        KnowledgeCreate(
                            topic=chunk.topic[:255],
                            content=chunk.content,
                            content_type=content_type,
                            metadata={"source_file": path.name, "order": chunk.order},
                        ),
                    )
                except Exception as e:
                    await db.rollback()
                    logger.warning(f"Could not import {label}: {e}")
                    report.record_failure(label, e)
                    continue
                report.record_success(item.id)

        return report
