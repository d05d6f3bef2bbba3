"""Generate overall, per-subject, and per-topic summaries with a chat model."""

from __future__ import annotations

from typing import Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable

from .errors import Stage
from .llm import build_structured_chain, invoke_structured
from .schemas import SummarizeSyllabusOutput
from .types import SyllabusSummary


SUMMARY_PROMPT = ChatPromptTemplate.from_messages(
    [
        (
            "system",
            "You are an expert academic assistant. The provided syllabus text may cover one or more subjects.",
        ),
        (
            "human",
            "1. Provide an overall syllabus summary: a concise high-level summary of the entire "
            "syllabus document, covering all subjects if multiple are present.\n"
            "2. For each subject identified in the syllabus, provide its name exactly as it would be "
            "identified by a parsing process, a detailed summary covering its main themes, objectives, "
            "and learning outcomes, and a concise summary for each of its topics, using each topic "
            "name exactly as it appears in the syllabus.\n"
            "If no subjects are clearly identifiable, the list of subject summaries can be empty, "
            "but still provide an overall summary if possible.\n\n"
            "Syllabus Text:\n{syllabus_text}",
        ),
    ]
)


class SyllabusSummarizer:
    """Summarizes syllabus text into advisory annotations keyed by name."""

    def __init__(self, llm: Optional[BaseChatModel] = None, chain: Optional[Runnable] = None) -> None:
        if chain is None:
            if llm is None:
                raise ValueError("SyllabusSummarizer needs either a chat model or a prepared chain.")
            chain = build_structured_chain(llm, SUMMARY_PROMPT, SummarizeSyllabusOutput)
        self._chain = chain

    async def summarize(self, syllabus_text: str) -> SyllabusSummary:
        output = await invoke_structured(
            self._chain, SummarizeSyllabusOutput, Stage.SUMMARIZATION, syllabus_text
        )
        return output.to_summary()

    __call__ = summarize
