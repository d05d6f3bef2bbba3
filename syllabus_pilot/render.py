"""Render merged syllabus views as Markdown or JSON-ready dictionaries."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from .types import MergedSubjectView


NO_SUBJECTS_NOTICE = (
    "The AI could not identify distinct subjects in the provided text. "
    "The overall summary might still be useful."
)
NO_TOPICS_NOTICE = "No topics listed for this unit."


def render_markdown(overall_summary: str, views: Sequence[MergedSubjectView], overall_progress: int) -> str:
    lines: List[str] = ["# Syllabus", ""]
    if overall_summary:
        lines.extend(["## Overall Syllabus Summary", "", overall_summary.strip(), ""])
    lines.extend([f"Overall progress: {overall_progress}%", ""])

    if not views:
        lines.extend(["> No Subjects Found", f"> {NO_SUBJECTS_NOTICE}", ""])

    for view in views:
        lines.append(f"## {view.subject.name} ({view.progress}%)")
        lines.append("")
        lines.append(f"**Subject Summary:** {view.summary.subject_summary}")
        lines.append("")
        for unit in view.units:
            lines.append(f"### {unit.name} ({unit.progress}%)")
            lines.append("")
            if not unit.topics:
                lines.append(f"_{NO_TOPICS_NOTICE}_")
            for topic in unit.topics:
                mark = "x" if topic.completed else " "
                line = f"- [{mark}] {topic.name}"
                if topic.summary:
                    line = f"{line}: {topic.summary}"
                lines.append(line)
            lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def views_to_dict(overall_summary: str, views: Sequence[MergedSubjectView], overall_progress: int) -> Dict[str, Any]:
    return {
        "overall_summary": overall_summary,
        "overall_progress": overall_progress,
        "subjects": [
            {
                "subject": view.subject.name,
                "summary": view.summary.subject_summary,
                "has_summary": view.has_summary,
                "progress": view.progress,
                "units": [
                    {
                        "unit": unit.name,
                        "progress": unit.progress,
                        "topics": [
                            {
                                "topic": topic.name,
                                "completed": topic.completed,
                                "summary": topic.summary,
                            }
                            for topic in unit.topics
                        ],
                    }
                    for unit in view.units
                ],
            }
            for view in views
        ],
    }
