import pytest

from syllabus_pilot.errors import InvalidStructureInput
from syllabus_pilot.progress import CompletionMap
from syllabus_pilot.reconciliation import FALLBACK_SUBJECT_SUMMARY, reconcile
from syllabus_pilot.types import Subject, SubjectSummary, SyllabusSummary, TopicSummary, Unit


def _topic_names(views):
    return [(view.subject.name, unit.name, topic.name) for view in views for unit in view.units for topic in unit.topics]


def _structure_names(subjects):
    return [(s.name, u.name, t) for s in subjects for u in s.units for t in u.topics]


def test_matching_subject_is_paired_and_topics_annotated(two_subjects, summary):
    views = reconcile(two_subjects, summary)

    algorithms = views[0]
    assert algorithms.has_summary
    assert algorithms.summary.subject_summary == "Classic algorithm design."
    sorting = algorithms.units[0]
    assert sorting.topics[0].summary == "Partition-based sorting."
    assert sorting.topics[1].summary is None


def test_unmatched_subject_gets_placeholder(two_subjects, summary):
    databases = reconcile(two_subjects, summary)[1]

    assert not databases.has_summary
    assert databases.summary.subject_summary == FALLBACK_SUBJECT_SUMMARY
    assert databases.summary.topic_summaries == []
    assert all(topic.summary is None for unit in databases.units for topic in unit.topics)


def test_case_mismatch_falls_back_without_affecting_progress(algorithms):
    lowercase = SyllabusSummary(
        overall_summary="",
        subject_summaries=[SubjectSummary(subject_name="algorithms", subject_summary="lower", topic_summaries=[])],
    )
    completion = CompletionMap({("Algorithms", "Sorting", "Quicksort"): True})

    view = reconcile(algorithms, lowercase, completion)[0]

    assert view.summary.subject_summary == FALLBACK_SUBJECT_SUMMARY
    assert view.progress == 50
    assert view.units[0].progress == 50


def test_structure_is_never_changed_by_summary(two_subjects, summary):
    views = reconcile(two_subjects, summary)

    assert _topic_names(views) == _structure_names(two_subjects)
    assert "Heapsort" not in [name for _, _, name in _topic_names(views)]


def test_order_follows_structure_not_summary(two_subjects):
    reversed_summary = SyllabusSummary(
        overall_summary="",
        subject_summaries=[
            SubjectSummary(subject_name="Databases", subject_summary="db", topic_summaries=[]),
            SubjectSummary(subject_name="Algorithms", subject_summary="algo", topic_summaries=[]),
        ],
    )

    views = reconcile(two_subjects, reversed_summary)

    assert [view.subject.name for view in views] == ["Algorithms", "Databases"]
    assert [view.summary.subject_summary for view in views] == ["algo", "db"]


def test_first_match_wins_for_duplicate_names():
    subjects = [
        Subject(name="Maths", units=[Unit(name="Calculus", topics=["Limits", "Limits"])]),
        Subject(name="Maths", units=[]),
    ]
    summary = SyllabusSummary(
        overall_summary="",
        subject_summaries=[
            SubjectSummary(
                subject_name="Maths",
                subject_summary="first",
                topic_summaries=[
                    TopicSummary(topic_name="Limits", summary="one"),
                    TopicSummary(topic_name="Limits", summary="two"),
                ],
            ),
            SubjectSummary(subject_name="Maths", subject_summary="second", topic_summaries=[]),
        ],
    )

    views = reconcile(subjects, summary)

    assert [view.summary.subject_summary for view in views] == ["first", "first"]
    assert [topic.summary for topic in views[0].units[0].topics] == ["one", "one"]
    assert len(views[0].units[0].topics) == 2


def test_missing_summary_uses_placeholders(two_subjects):
    views = reconcile(two_subjects, None)
    assert all(view.summary.subject_summary == FALLBACK_SUBJECT_SUMMARY for view in views)


def test_completion_flags_and_progress_are_attached(two_subjects):
    completion = CompletionMap()
    completion.toggle("Algorithms", "Graphs", "DFS")

    view = reconcile(two_subjects, None, completion)[0]

    graphs = view.units[1]
    assert [topic.completed for topic in graphs.topics] == [False, True, False]
    assert graphs.progress == 33
    assert view.progress == 20


def test_empty_structure_reconciles_to_nothing(summary):
    assert reconcile([], summary) == []


@pytest.mark.parametrize(
    "subjects",
    [None, "Algorithms", [{"subject": "Algorithms"}], [Subject(name="A", units=None)]],
)
def test_invalid_structure_is_rejected(subjects, summary):
    with pytest.raises(InvalidStructureInput):
        reconcile(subjects, summary)
