"""
Document extraction for knowledge ingestion

Turns external documents into plain-text artifacts ready to be embedded:
- Word documents (.docx) via python-docx
- Markdown and plain text, decoded as UTF-8 with a latin-1 fallback
"""

import io
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from docx import Document as DocxDocument

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class IngestionReport:
    """Outcome of a best-effort batch: one entry per input item"""
    succeeded: int = 0
    failed: int = 0
    outputs: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.succeeded + self.failed

    def record_success(self, output: str) -> None:
        self.succeeded += 1
        self.outputs.append(output)

    def record_failure(self, item: str, error: Exception) -> None:
        self.failed += 1
        self.errors[item] = str(error) or error.__class__.__name__


class DocumentService:
    """Extracts raw text from documents"""

    DOCUMENT_EXTENSIONS = {
        '.docx': 'docx',
        '.md': 'markdown',
        '.markdown': 'markdown',
        '.txt': 'text',
        '.text': 'text',
    }

    def detect_file_type(self, filename: str) -> Optional[str]:
        ext = os.path.splitext(filename.lower())[1]
        return self.DOCUMENT_EXTENSIONS.get(ext)

    def extract_text(self, filename: str, content: bytes) -> str:
        """Extract plain text from file bytes. Raises on unreadable input."""
        file_type = self.detect_file_type(filename)
        if file_type == 'docx':
            return self._extract_docx(content)
        if file_type in ('markdown', 'text'):
            return self._decode(content)
        raise ValueError(f"Unsupported file type: {filename}")

    def _extract_docx(self, content: bytes) -> str:
        doc = DocxDocument(io.BytesIO(content))
        paragraphs = [para.text for para in doc.paragraphs]
        return "\n".join(paragraphs).strip()

    @staticmethod
    def _decode(content: bytes) -> str:
        try:
            return content.decode("utf-8")
        except UnicodeDecodeError:
            return content.decode("latin-1")

    @staticmethod
    def artifact_path(path: Path, output_dir: Path, taken: Optional[set] = None) -> Path:
        """
        Pick the .txt artifact path for a document.

        ``<stem>.txt`` unless that name is already taken in this batch or is
        the document itself, then ``<stem>.<ext>.txt`` and finally a counter.
        """
        taken = taken if taken is not None else set()
        source = path.resolve()
        candidates = [f"{path.stem}.txt", f"{path.stem}{path.suffix.lower()}.txt"]
        for name in candidates:
            candidate = output_dir / name
            if candidate.resolve() != source and candidate.resolve() not in taken:
                return candidate
        n = 2
        while True:
            candidate = output_dir / f"{path.stem}-{n}.txt"
            if candidate.resolve() != source and candidate.resolve() not in taken:
                return candidate
            n += 1

    def extract_file(
        self, path: PathLike, output_dir: PathLike, taken: Optional[set] = None
    ) -> Path:
        """Extract one document into ``<output_dir>/<stem>.txt`` (see artifact_path)."""
        path = Path(path)
        text = self.extract_text(path.name, path.read_bytes())
        output_path = self.artifact_path(path, Path(output_dir), taken)
        output_path.write_text(text, encoding="utf-8")
        return output_path

    def list_documents(self, input_dir: PathLike, extensions: Optional[List[str]] = None) -> List[Path]:
        allowed = set(extensions or self.DOCUMENT_EXTENSIONS)
        return sorted(
            p for p in Path(input_dir).iterdir()
            if p.is_file() and p.suffix.lower() in allowed
        )

    def extract_directory(
        self,
        input_dir: PathLike,
        output_dir: Optional[PathLike] = None,
        extensions: Optional[List[str]] = None,
    ) -> IngestionReport:
        """
        Extract every document in input_dir to a .txt artifact.

        Best effort: a document that cannot be read is logged and counted,
        the rest of the batch still runs.
        """
        input_dir = Path(input_dir)
        output_dir = Path(output_dir) if output_dir else input_dir / "extracted"
        output_dir.mkdir(parents=True, exist_ok=True)

        report = IngestionReport()
        documents = self.list_documents(input_dir, extensions)
        # inputs are never overwritten when extracting in place
        taken = {p.resolve() for p in documents}
        for path in documents:
            try:
                output_path = self.extract_file(path, output_dir, taken)
            except Exception as e:
                logger.warning(f"Could not extract {path.name}: {e}")
                report.record_failure(path.name, e)
                continue
            taken.add(output_path.resolve())
            logger.info(f"Extracted {path.name} -> {output_path}")
            report.record_success(str(output_path))

        return report


_document_service: Optional[DocumentService] = None


def get_document_service() -> DocumentService:
    global _document_service
    if _document_service is None:
        _document_service = DocumentService()
    return _document_service
