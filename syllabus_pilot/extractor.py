"""Turn uploaded PDF, Markdown, and TXT documents into one syllabus string."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import List

from pypdf import PasswordType, PdfReader
from pypdf.errors import DependencyError, FileNotDecryptedError

from .errors import ExtractionError, ExtractionErrorKind
from .types import RawDocument


logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
TEXT_MEDIA_TYPES = {"text/plain", "text/markdown"}
SUPPORTED_EXTENSIONS = {
    ".pdf": PDF_MEDIA_TYPE,
    ".md": "text/markdown",
    ".markdown": "text/markdown",
    ".txt": "text/plain",
}
PAGE_BREAK = "\n\n--- page break ---\n\n"


def guess_media_type(path: Path) -> str:
    """Map a file extension to a media type, raising for unknown extensions."""
    media_type = SUPPORTED_EXTENSIONS.get(path.suffix.lower())
    if media_type is None:
        raise ExtractionError(ExtractionErrorKind.UNSUPPORTED_FORMAT, path.suffix or path.name)
    return media_type


def load_document(path: Path) -> RawDocument:
    path = Path(path)
    return RawDocument(content=path.read_bytes(), media_type=guess_media_type(path), filename=path.name)


class TextExtractor:
    """Extracts page-ordered text from a `RawDocument`."""

    def __init__(self, password: str | None = None) -> None:
        self.password = password

    def extract(self, document: RawDocument) -> str:
        media_type = document.media_type.split(";")[0].strip().lower()
        if media_type == PDF_MEDIA_TYPE:
            text = self._extract_pdf(document.content)
        elif media_type in TEXT_MEDIA_TYPES:
            text = self._extract_text_like(document.content)
        else:
            raise ExtractionError(ExtractionErrorKind.UNSUPPORTED_FORMAT, document.media_type)
        if not text.strip():
            raise ExtractionError(ExtractionErrorKind.EMPTY_CONTENT)
        return text

    def _extract_pdf(self, content: bytes) -> str:
        reader = self._open_pdf(content)
        try:
            pages = list(reader.pages)
        except FileNotDecryptedError as exc:
            raise ExtractionError(ExtractionErrorKind.PASSWORD_PROTECTED) from exc
        except Exception as exc:
            raise ExtractionError(ExtractionErrorKind.CORRUPTED_DOCUMENT, str(exc)) from exc

        parts: List[str] = []
        for idx, page in enumerate(pages, start=1):
            try:
                text = page.extract_text() or ""
            except DependencyError as exc:
                raise ExtractionError(ExtractionErrorKind.ENGINE_UNAVAILABLE, str(exc)) from exc
            except Exception as exc:
                logger.warning("Skipping page %d: text extraction failed: %s", idx, exc)
                continue
            if text.strip():
                parts.append(text)
        logger.debug("Extracted text from %d of %d pages", len(parts), len(pages))
        return PAGE_BREAK.join(parts)

    def _open_pdf(self, content: bytes) -> PdfReader:
        if not content:
            raise ExtractionError(ExtractionErrorKind.EMPTY_CONTENT)
        try:
            reader = PdfReader(io.BytesIO(content))
        except DependencyError as exc:
            raise ExtractionError(ExtractionErrorKind.ENGINE_UNAVAILABLE, str(exc)) from exc
        except Exception as exc:
            raise ExtractionError(ExtractionErrorKind.CORRUPTED_DOCUMENT, str(exc)) from exc

        if reader.is_encrypted:
            try:
                result = reader.decrypt(self.password or "")
            except DependencyError as exc:
                raise ExtractionError(ExtractionErrorKind.ENGINE_UNAVAILABLE, str(exc)) from exc
            except Exception as exc:
                raise ExtractionError(ExtractionErrorKind.CORRUPTED_DOCUMENT, str(exc)) from exc
            if result == PasswordType.NOT_DECRYPTED:
                raise ExtractionError(ExtractionErrorKind.PASSWORD_PROTECTED)
        return reader

    @staticmethod
    def _extract_text_like(content: bytes) -> str:
        try:
            return content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ExtractionError(ExtractionErrorKind.CORRUPTED_DOCUMENT, "text is not valid UTF-8") from exc
