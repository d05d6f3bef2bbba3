"""Sparse topic completion tracking and hierarchical progress percentages."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, Mapping, Sequence, Tuple

from .types import Subject, TopicKey, Unit


class CompletionMap:
    """Mapping of `TopicKey` to a completion flag. Absent keys read as False.

    Keys for topics that are no longer in the parsed structure are kept but
    never counted by the aggregation functions below.
    """

    def __init__(self, entries: Mapping[Tuple[str, str, str], bool] | None = None) -> None:
        self._done: Dict[TopicKey, bool] = {}
        for key, value in (entries or {}).items():
            self._done[TopicKey(*key)] = bool(value)

    def toggle(self, subject: str, unit: str, topic: str) -> bool:
        key = TopicKey(subject, unit, topic)
        value = not self._done.get(key, False)
        self._done[key] = value
        return value

    def is_completed(self, subject: str, unit: str, topic: str) -> bool:
        return self._done.get(TopicKey(subject, unit, topic), False)

    def clear(self) -> None:
        self._done.clear()

    def items(self) -> Iterator[Tuple[TopicKey, bool]]:
        return iter(self._done.items())

    def __len__(self) -> int:
        return len(self._done)

    def __contains__(self, key: object) -> bool:
        return key in self._done

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompletionMap):
            return NotImplemented
        return self._done == other._done

    def __repr__(self) -> str:
        return f"CompletionMap({self._done!r})"


def percent(completed: int, total: int) -> int:
    """Round-half-up integer percentage; 0 when there is nothing to complete."""
    if total <= 0:
        return 0
    return (200 * completed + total) // (2 * total)


def _count_unit(unit: Unit, subject_name: str, completion: CompletionMap) -> Tuple[int, int]:
    done = sum(1 for topic in unit.topics if completion.is_completed(subject_name, unit.name, topic))
    return done, len(unit.topics)


def _count_subject(subject: Subject, completion: CompletionMap) -> Tuple[int, int]:
    done = total = 0
    for unit in subject.units:
        unit_done, unit_total = _count_unit(unit, subject.name, completion)
        done += unit_done
        total += unit_total
    return done, total


def unit_progress(unit: Unit, subject_name: str, completion: CompletionMap) -> int:
    return percent(*_count_unit(unit, subject_name, completion))


def subject_progress(subject: Subject, completion: CompletionMap) -> int:
    return percent(*_count_subject(subject, completion))


def overall_progress(subjects: Sequence[Subject], completion: CompletionMap) -> int:
    done = total = 0
    for subject in subjects:
        subject_done, subject_total = _count_subject(subject, completion)
        done += subject_done
        total += subject_total
    return percent(done, total)


def iter_topic_keys(subjects: Iterable[Subject]) -> Iterator[TopicKey]:
    for subject in subjects:
        for unit in subject.units:
            for topic in unit.topics:
                yield TopicKey(subject.name, unit.name, topic)
