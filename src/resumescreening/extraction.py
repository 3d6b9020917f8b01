"""Plain-text extraction for uploaded PDF and Word resumes."""

from __future__ import annotations

import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import docx
import pymupdf
import structlog

from .schemas import DOCX, MSWORD, PDF, SourceFile

SUPPORTED_MEDIA_TYPES: frozenset[str] = frozenset({PDF, MSWORD, DOCX})

_STAGING_SUFFIXES: dict[str, str] = {PDF: ".pdf", MSWORD: ".doc", DOCX: ".docx"}


class ExtractionError(Exception):
    """Base class for per-document extraction failures."""

    kind = "extraction_error"


class UnsupportedType(ExtractionError):
    kind = "unsupported_type"

    def __init__(self, file_name: str, media_type: str):
        super().__init__(f"Unsupported file type: {media_type or 'unknown'} ({file_name})")
        self.file_name = file_name
        self.media_type = media_type


class ParseFailure(ExtractionError):
    kind = "parse_failure"

    def __init__(self, file_name: str, cause: BaseException):
        super().__init__(f"Failed to parse {file_name}: {cause}")
        self.file_name = file_name
        self.cause = cause


class EmptyDocument(ExtractionError):
    kind = "empty_document"

    def __init__(self, file_name: str):
        super().__init__(f"No text content extracted from: {file_name}")
        self.file_name = file_name


class DocumentTextExtractor:
    """Convert PDF and Word uploads into plain text.

    Parsers read from a staged temporary file which is removed once the
    document has been processed, whether or not parsing succeeded.
    """

    def __init__(self, *, staging_dir: str | Path | None = None) -> None:
        self._staging_dir = Path(staging_dir) if staging_dir else None
        self._logger = structlog.get_logger(__name__)

    def extract(self, source: SourceFile) -> str:
        if source.media_type not in SUPPORTED_MEDIA_TYPES:
            raise UnsupportedType(source.file_name, source.media_type)

        with self._staged(source) as path:
            try:
                if source.media_type == PDF:
                    text = pdf_to_text(path)
                else:
                    text = word_to_text(path)
            except Exception as exc:  # noqa: BLE001
                self._logger.warning(
                    "extraction.parse_failed",
                    file_name=source.file_name,
                    media_type=source.media_type,
                    error=str(exc),
                )
                raise ParseFailure(source.file_name, exc) from exc

        if not text.strip():
            raise EmptyDocument(source.file_name)

        self._logger.debug(
            "extraction.completed",
            file_name=source.file_name,
            characters=len(text),
        )
        return text

    @contextmanager
    def _staged(self, source: SourceFile) -> Iterator[Path]:
        if self._staging_dir:
            self._staging_dir.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            suffix=_STAGING_SUFFIXES[source.media_type],
            dir=self._staging_dir,
            delete=False,
        ) as handle:
            handle.write(source.content)
            staged = Path(handle.name)
        try:
            yield staged
        finally:
            staged.unlink(missing_ok=True)


def pdf_to_text(path: str | Path) -> str:
    """Join each page's words with single spaces, one line per page, in page order."""

    lines: list[str] = []
    with pymupdf.open(str(path)) as document:
        for page in document:
            words = page.get_text("words")
            lines.append(" ".join(word[4] for word in words))
    return "".join(f"{line}\n" for line in lines)


def word_to_text(path: str | Path) -> str:
    """Return the raw text of a Word document, paragraphs first, then table cells."""

    document = docx.Document(str(path))
    blocks = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            blocks.extend(cell.text for cell in row.cells)
    return "\n\n".join(blocks)


__all__ = [
    "DocumentTextExtractor",
    "EmptyDocument",
    "ExtractionError",
    "ParseFailure",
    "SUPPORTED_MEDIA_TYPES",
    "UnsupportedType",
    "pdf_to_text",
    "word_to_text",
]
