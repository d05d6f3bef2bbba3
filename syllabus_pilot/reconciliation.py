"""Join the parsed syllabus structure with the independently produced summary.

The parsed subjects are authoritative: every subject, unit, and topic they
contain is emitted exactly once, in the parser's order. The summary only
annotates. Matching is exact, case-sensitive string equality and the first
match in summary order wins.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .errors import InvalidStructureInput
from .progress import CompletionMap, subject_progress, unit_progress
from .types import (
    MergedSubjectView,
    MergedTopic,
    MergedUnit,
    Subject,
    SubjectSummary,
    SyllabusSummary,
    TopicKey,
    Unit,
)


logger = logging.getLogger(__name__)

FALLBACK_SUBJECT_SUMMARY = "No detailed summary available for this subject."


def find_subject_summary(name: str, summaries: Sequence[SubjectSummary]) -> Optional[SubjectSummary]:
    for entry in summaries:
        if entry.subject_name == name:
            return entry
    return None


def find_topic_summary(topic: str, summary: SubjectSummary) -> Optional[str]:
    for entry in summary.topic_summaries:
        if entry.topic_name == topic:
            return entry.summary
    return None


def placeholder_summary(subject_name: str) -> SubjectSummary:
    return SubjectSummary(
        subject_name=subject_name,
        subject_summary=FALLBACK_SUBJECT_SUMMARY,
        topic_summaries=[],
    )


def reconcile(
    subjects: Optional[Sequence[Subject]],
    summary: Optional[SyllabusSummary],
    completion: Optional[CompletionMap] = None,
) -> List[MergedSubjectView]:
    """Merge structure and summary into one view per parsed subject."""
    _validate_structure(subjects)
    completion = completion if completion is not None else CompletionMap()
    subject_summaries = list(summary.subject_summaries) if summary is not None else []

    views: List[MergedSubjectView] = []
    for subject in subjects:
        matched = find_subject_summary(subject.name, subject_summaries)
        if matched is None:
            logger.warning(
                "No detailed summary found for subject: %s. Displaying with basic structure.",
                subject.name,
            )
        subject_summary = matched or placeholder_summary(subject.name)
        units = [_merge_unit(subject.name, unit, subject_summary, completion) for unit in subject.units]
        views.append(
            MergedSubjectView(
                subject=subject,
                summary=subject_summary,
                units=units,
                progress=subject_progress(subject, completion),
                has_summary=matched is not None,
            )
        )
    return views


def _merge_unit(
    subject_name: str,
    unit: Unit,
    subject_summary: SubjectSummary,
    completion: CompletionMap,
) -> MergedUnit:
    topics = [
        MergedTopic(
            name=topic,
            key=TopicKey(subject_name, unit.name, topic),
            completed=completion.is_completed(subject_name, unit.name, topic),
            summary=find_topic_summary(topic, subject_summary),
        )
        for topic in unit.topics
    ]
    return MergedUnit(
        name=unit.name,
        topics=topics,
        progress=unit_progress(unit, subject_name, completion),
    )


def _validate_structure(subjects: object) -> None:
    if subjects is None:
        raise InvalidStructureInput("Subject list is missing.")
    if isinstance(subjects, (str, bytes)) or not isinstance(subjects, Sequence):
        raise InvalidStructureInput(f"Subject list must be a sequence, got {type(subjects).__name__}.")
    for idx, subject in enumerate(subjects):
        if not isinstance(subject, Subject):
            raise InvalidStructureInput(f"Entry {idx} is not a Subject: {subject!r}")
        if subject.units is None:
            raise InvalidStructureInput(f"Subject {subject.name!r} has no unit list.")
        for unit in subject.units:
            if not isinstance(unit, Unit) or unit.topics is None:
                raise InvalidStructureInput(f"Subject {subject.name!r} has a malformed unit: {unit!r}")
