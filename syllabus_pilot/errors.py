"""Error taxonomy for syllabus processing."""

from __future__ import annotations

from enum import Enum


class SyllabusPilotError(Exception):
    """Base class for all errors raised by the syllabus pilot."""

    def user_message(self) -> str:
        return str(self)


class InputError(SyllabusPilotError):
    """Empty text or no file selected. Raised before any AI call."""


class ExtractionErrorKind(str, Enum):
    UNSUPPORTED_FORMAT = "unsupported_format"
    EMPTY_CONTENT = "empty_content"
    CORRUPTED_DOCUMENT = "corrupted_document"
    PASSWORD_PROTECTED = "password_protected"
    ENGINE_UNAVAILABLE = "engine_unavailable"


_EXTRACTION_MESSAGES = {
    ExtractionErrorKind.UNSUPPORTED_FORMAT: "This file type is not supported. Please upload a PDF or plain text file.",
    ExtractionErrorKind.EMPTY_CONTENT: "No text could be extracted from the document. It may be a scanned image.",
    ExtractionErrorKind.CORRUPTED_DOCUMENT: "The document appears to be corrupted and could not be read.",
    ExtractionErrorKind.PASSWORD_PROTECTED: "The document is password protected.",
    ExtractionErrorKind.ENGINE_UNAVAILABLE: "The document reader could not be initialised on this server.",
}


class ExtractionError(SyllabusPilotError):
    """Text extraction failed; no AI call is made."""

    def __init__(self, kind: ExtractionErrorKind, detail: str | None = None) -> None:
        self.kind = kind
        self.detail = detail
        message = _EXTRACTION_MESSAGES[kind]
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)

    def user_message(self) -> str:
        return f"Could not read the document: {_EXTRACTION_MESSAGES[self.kind]}"


class Stage(str, Enum):
    PARSING = "parsing"
    SUMMARIZATION = "summarization"


_STAGE_LABELS = {
    Stage.PARSING: "parse the syllabus structure",
    Stage.SUMMARIZATION: "summarize the syllabus",
}


class UpstreamError(SyllabusPilotError):
    """The structure parser or summarizer rejected or returned no usable output."""

    def __init__(self, stage: Stage, message: str) -> None:
        self.stage = stage
        super().__init__(message)

    def user_message(self) -> str:
        return f"The AI model could not {_STAGE_LABELS[self.stage]}: {self}"


class UpstreamFormatError(UpstreamError):
    """A non-structured payload came back where structured data was expected."""

    def user_message(self) -> str:
        return (
            f"The AI model returned an unreadable response while trying to "
            f"{_STAGE_LABELS[self.stage]}: {self}"
        )


class InvalidStructureInput(SyllabusPilotError):
    """The authoritative subject list handed to reconciliation is malformed."""
