"""Per-syllabus session state: Empty -> Loading -> Ready."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .errors import SyllabusPilotError
from .progress import CompletionMap, overall_progress, subject_progress, unit_progress
from .reconciliation import reconcile
from .types import MergedSubjectView, Subject, SyllabusSummary, Unit


logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"


@dataclass
class SessionSnapshot:
    """Everything needed to restore a ready session."""

    syllabus_text: str
    subjects: List[Subject]
    summary: SyllabusSummary
    completion: CompletionMap = field(default_factory=CompletionMap)


class SyllabusSession:
    """Owns the loaded syllabus and its completion map.

    Every submission gets a generation number from `begin`. Results that
    arrive for an older generation are discarded.
    """

    def __init__(self) -> None:
        self.state = SessionState.EMPTY
        self.generation = 0
        self.syllabus_text: Optional[str] = None
        self.subjects: List[Subject] = []
        self.summary: Optional[SyllabusSummary] = None
        self.completion = CompletionMap()
        self.error_message: Optional[str] = None

    def begin(self) -> int:
        self.generation += 1
        self.state = SessionState.LOADING
        self.error_message = None
        self._clear_results()
        return self.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def complete(
        self,
        generation: int,
        syllabus_text: str,
        subjects: List[Subject],
        summary: SyllabusSummary,
    ) -> bool:
        if not self.is_current(generation):
            logger.info("Discarding result of superseded submission %d (current is %d)", generation, self.generation)
            return False
        self.syllabus_text = syllabus_text
        self.subjects = list(subjects)
        self.summary = summary
        self.completion = CompletionMap()
        self.state = SessionState.READY
        return True

    def fail(self, generation: int, error: SyllabusPilotError) -> bool:
        if not self.is_current(generation):
            logger.info("Discarding failure of superseded submission %d: %s", generation, error)
            return False
        self._clear_results()
        self.state = SessionState.EMPTY
        self.error_message = error.user_message()
        return True

    def reject_input(self, error: SyllabusPilotError) -> None:
        """Record a local input error without starting a submission."""
        self.error_message = error.user_message()

    def toggle_topic(self, subject: str, unit: str, topic: str) -> bool:
        if self.state is not SessionState.READY:
            raise RuntimeError(f"Cannot toggle topics while the session is {self.state.value}.")
        return self.completion.toggle(subject, unit, topic)

    def unit_progress(self, unit: Unit, subject_name: str) -> int:
        return unit_progress(unit, subject_name, self.completion)

    def subject_progress(self, subject: Subject) -> int:
        return subject_progress(subject, self.completion)

    def overall_progress(self) -> int:
        return overall_progress(self.subjects, self.completion)

    def merged_view(self) -> List[MergedSubjectView]:
        if self.state is not SessionState.READY:
            return []
        return reconcile(self.subjects, self.summary, self.completion)

    def snapshot(self) -> SessionSnapshot:
        if self.state is not SessionState.READY:
            raise RuntimeError("Only a ready session can be saved.")
        return SessionSnapshot(
            syllabus_text=self.syllabus_text or "",
            subjects=list(self.subjects),
            summary=self.summary,
            completion=CompletionMap(dict(self.completion.items())),
        )

    def restore(self, snapshot: SessionSnapshot) -> None:
        self.generation += 1
        self.syllabus_text = snapshot.syllabus_text
        self.subjects = list(snapshot.subjects)
        self.summary = snapshot.summary
        self.completion = CompletionMap(dict(snapshot.completion.items()))
        self.error_message = None
        self.state = SessionState.READY

    def _clear_results(self) -> None:
        self.syllabus_text = None
        self.subjects = []
        self.summary = None
        self.completion = CompletionMap()
