import asyncio

import pytest

from syllabus_pilot.types import Subject, SubjectSummary, SyllabusSummary, TopicSummary, Unit


@pytest.fixture
def algorithms():
    return [Subject(name="Algorithms", units=[Unit(name="Sorting", topics=["Quicksort", "Mergesort"])])]


@pytest.fixture
def two_subjects():
    return [
        Subject(
            name="Algorithms",
            units=[
                Unit(name="Sorting", topics=["Quicksort", "Mergesort"]),
                Unit(name="Graphs", topics=["BFS", "DFS", "Dijkstra"]),
            ],
        ),
        Subject(
            name="Databases",
            units=[
                Unit(name="SQL", topics=["Joins"]),
                Unit(name="Reading", topics=[]),
            ],
        ),
    ]


@pytest.fixture
def summary():
    return SyllabusSummary(
        overall_summary="A course pair on algorithms and databases.",
        subject_summaries=[
            SubjectSummary(
                subject_name="Algorithms",
                subject_summary="Classic algorithm design.",
                topic_summaries=[
                    TopicSummary(topic_name="Quicksort", summary="Partition-based sorting."),
                    TopicSummary(topic_name="Heapsort", summary="Not in the structure."),
                ],
            ),
        ],
    )


class FakeCall:
    """Async stand-in for the parser or summarizer that records its calls."""

    def __init__(self, result=None, error=None, delay=0.0):
        self.result = result
        self.error = error
        self.delay = delay
        self.calls = []

    async def __call__(self, syllabus_text):
        self.calls.append(syllabus_text)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result
