import asyncio

import pytest
from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableLambda

from syllabus_pilot.errors import Stage, UpstreamError, UpstreamFormatError
from syllabus_pilot.schemas import ParseSyllabusOutput, SummarizeSyllabusOutput
from syllabus_pilot.structure_parser import StructureParser
from syllabus_pilot.summarizer import SyllabusSummarizer
from syllabus_pilot.types import Subject, Unit


PARSED = ParseSyllabusOutput.model_validate(
    {"subjects": [{"subject": "Algorithms", "units": [{"unit": "Sorting", "topics": ["Quicksort", "Mergesort"]}]}]}
)

SUMMARY_PAYLOAD = {
    "overallSyllabusSummary": "Overview.",
    "subjectsDetailedSummaries": [
        {
            "subjectName": "Algorithms",
            "subjectSummary": "Design and analysis.",
            "topicSummaries": [{"topicName": "Quicksort", "summary": "Partitioning."}],
        }
    ],
}


def _chain(result):
    return RunnableLambda(lambda _: result)


def _failing_chain(exc):
    def _raise(_):
        raise exc

    return RunnableLambda(_raise)


def test_parser_converts_structured_output():
    parser = StructureParser(chain=_chain({"raw": AIMessage(content=""), "parsed": PARSED, "parsing_error": None}))

    subjects = asyncio.run(parser.parse("syllabus"))

    assert subjects == [Subject(name="Algorithms", units=[Unit(name="Sorting", topics=["Quicksort", "Mergesort"])])]


def test_summarizer_reads_camel_case_payload():
    parsed = SummarizeSyllabusOutput.model_validate(SUMMARY_PAYLOAD)
    summarizer = SyllabusSummarizer(chain=_chain({"raw": None, "parsed": parsed, "parsing_error": None}))

    summary = asyncio.run(summarizer.summarize("syllabus"))

    assert summary.overall_summary == "Overview."
    assert summary.subject_summaries[0].subject_name == "Algorithms"
    assert summary.subject_summaries[0].topic_summaries[0].topic_name == "Quicksort"


def test_parsed_dict_is_validated():
    summarizer = SyllabusSummarizer(chain=_chain({"raw": None, "parsed": SUMMARY_PAYLOAD, "parsing_error": None}))
    summary = asyncio.run(summarizer.summarize("syllabus"))
    assert summary.subject_summaries[0].subject_summary == "Design and analysis."


def test_empty_output_is_upstream_error_not_format_error():
    parser = StructureParser(chain=_chain({"raw": AIMessage(content=""), "parsed": None, "parsing_error": None}))

    with pytest.raises(UpstreamError) as info:
        asyncio.run(parser.parse("syllabus"))

    assert type(info.value) is UpstreamError
    assert info.value.stage is Stage.PARSING


def test_parsing_error_is_format_error():
    summarizer = SyllabusSummarizer(
        chain=_chain({"raw": AIMessage(content="Sure! Here is"), "parsed": None, "parsing_error": ValueError("bad json")})
    )

    with pytest.raises(UpstreamFormatError) as info:
        asyncio.run(summarizer.summarize("syllabus"))

    assert info.value.stage is Stage.SUMMARIZATION


def test_echoed_document_bytes_are_format_error():
    parser = StructureParser(chain=_chain({"raw": AIMessage(content="%PDF-1.7\n%âãÏÓ"), "parsed": None, "parsing_error": None}))

    with pytest.raises(UpstreamFormatError):
        asyncio.run(parser.parse("syllabus"))


@pytest.mark.parametrize("payload", [b"%PDF-1.4 raw", "just some prose"])
def test_unstructured_chain_result_is_format_error(payload):
    parser = StructureParser(chain=_chain(payload))
    with pytest.raises(UpstreamFormatError):
        asyncio.run(parser.parse("syllabus"))


def test_transport_failure_is_wrapped_with_stage():
    summarizer = SyllabusSummarizer(chain=_failing_chain(ConnectionError("connection reset")))

    with pytest.raises(UpstreamError) as info:
        asyncio.run(summarizer.summarize("syllabus"))

    assert info.value.stage is Stage.SUMMARIZATION
    assert isinstance(info.value.__cause__, ConnectionError)
    assert "summarize" in info.value.user_message()


def test_client_requires_model_or_chain():
    with pytest.raises(ValueError):
        StructureParser()
    with pytest.raises(ValueError):
        SyllabusSummarizer()


def test_prose_reply_without_tool_call_is_format_error():
    parser = StructureParser(
        chain=_chain(
            {
                "raw": AIMessage(content="I'm sorry, here is the syllabus in prose: Unit 1 covers sorting."),
                "parsed": None,
                "parsing_error": None,
            }
        )
    )

    with pytest.raises(UpstreamFormatError) as info:
        asyncio.run(parser.parse("syllabus"))

    assert info.value.stage is Stage.PARSING
    assert "plain text" in str(info.value)
