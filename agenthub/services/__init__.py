from agenthub.services.embedding_service import EmbeddingService, get_embedding_service
from agenthub.services.document_service import DocumentService, IngestionReport, get_document_service
from agenthub.services.knowledge_service import (
    KnowledgeService, KnowledgeChunk, split_markdown_by_headers, extract_keywords, format_context_with_xml,
)

__all__ = [
    "EmbeddingService",
    "get_embedding_service",
    "DocumentService",
    "IngestionReport",
    "get_document_service",
    "KnowledgeService",
    "KnowledgeChunk",
    "split_markdown_by_headers",
    "extract_keywords",
    "format_context_with_xml",
]
