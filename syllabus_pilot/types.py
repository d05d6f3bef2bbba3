"""Common data structures for the syllabus pilot."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional


@dataclass(frozen=True)
class RawDocument:
    """An uploaded file prior to text extraction."""

    content: bytes
    media_type: str
    filename: Optional[str] = None


@dataclass(frozen=True)
class Unit:
    """A subdivision of a subject with its ordered topics."""

    name: str
    topics: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Subject:
    """A top-level syllabus division as returned by the structure parser."""

    name: str
    units: List[Unit] = field(default_factory=list)


@dataclass(frozen=True)
class TopicSummary:
    topic_name: str
    summary: str


@dataclass(frozen=True)
class SubjectSummary:
    subject_name: str
    subject_summary: str
    topic_summaries: List[TopicSummary] = field(default_factory=list)


@dataclass(frozen=True)
class SyllabusSummary:
    """Advisory annotation produced by the summarizer."""

    overall_summary: str
    subject_summaries: List[SubjectSummary] = field(default_factory=list)


class TopicKey(NamedTuple):
    """Identity of a topic for completion tracking and summary lookup."""

    subject: str
    unit: str
    topic: str


@dataclass(frozen=True)
class MergedTopic:
    name: str
    key: TopicKey
    completed: bool
    summary: Optional[str] = None


@dataclass(frozen=True)
class MergedUnit:
    name: str
    topics: List[MergedTopic]
    progress: int


@dataclass(frozen=True)
class MergedSubjectView:
    """A parsed subject joined with its summary and computed progress."""

    subject: Subject
    summary: SubjectSummary
    units: List[MergedUnit]
    progress: int
    has_summary: bool = True
