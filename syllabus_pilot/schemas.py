"""Pydantic models describing the structured output of the two AI calls."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .types import SubjectSummary, Subject, SyllabusSummary, TopicSummary, Unit


class UnitOutput(BaseModel):
    unit: str = Field(description="The name of the unit.")
    topics: List[str] = Field(default_factory=list, description="The topics covered in the unit.")


class SubjectOutput(BaseModel):
    subject: str = Field(description="The name of the subject.")
    units: List[UnitOutput] = Field(
        default_factory=list,
        description="An array of units for this subject, each containing an array of topics.",
    )


class ParseSyllabusOutput(BaseModel):
    """Subjects, units, and topics extracted from a syllabus."""

    subjects: List[SubjectOutput] = Field(
        description=(
            "An array of subjects extracted from the syllabus. "
            "Each subject has a name and a list of its units and topics."
        )
    )

    def to_subjects(self) -> List[Subject]:
        return [
            Subject(
                name=item.subject,
                units=[Unit(name=unit.unit, topics=list(unit.topics)) for unit in item.units],
            )
            for item in self.subjects
        ]


class TopicSummaryOutput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    topic_name: str = Field(
        alias="topicName",
        description="The name of the topic. This should match a topic name parsed for this subject.",
    )
    summary: str = Field(description="The summary for this specific topic.")


class SubjectSummaryOutput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    subject_name: str = Field(
        alias="subjectName",
        description="The name of the subject this summary pertains to. This should match a subject name from the parsing step.",
    )
    subject_summary: str = Field(
        alias="subjectSummary",
        description="A detailed summary for this specific subject, covering its main themes, objectives, and learning outcomes.",
    )
    topic_summaries: List[TopicSummaryOutput] = Field(
        default_factory=list,
        alias="topicSummaries",
        description="A list of topic summaries specific to this subject.",
    )


class SummarizeSyllabusOutput(BaseModel):
    """Overall and per-subject summaries of a syllabus."""

    model_config = ConfigDict(populate_by_name=True)

    overall_syllabus_summary: str = Field(
        alias="overallSyllabusSummary",
        description="A concise high-level summary of the entire syllabus document, covering all subjects included.",
    )
    subjects_detailed_summaries: List[SubjectSummaryOutput] = Field(
        default_factory=list,
        alias="subjectsDetailedSummaries",
        description="An array of detailed summaries, one for each subject identified in the syllabus.",
    )

    def to_summary(self) -> SyllabusSummary:
        return SyllabusSummary(
            overall_summary=self.overall_syllabus_summary,
            subject_summaries=[
                SubjectSummary(
                    subject_name=item.subject_name,
                    subject_summary=item.subject_summary,
                    topic_summaries=[
                        TopicSummary(topic_name=ts.topic_name, summary=ts.summary)
                        for ts in item.topic_summaries
                    ],
                )
                for item in self.subjects_detailed_summaries
            ],
        )
