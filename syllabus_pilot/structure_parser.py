"""Split syllabus text into subjects, units, and topics with a chat model."""

from __future__ import annotations

from typing import List, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable

from .errors import Stage
from .llm import build_structured_chain, invoke_structured
from .schemas import ParseSyllabusOutput
from .types import Subject


PARSE_PROMPT = ChatPromptTemplate.from_messages(
    [
        (
            "system",
            "You are an AI assistant designed to parse syllabus text and extract structured information. "
            "The syllabus might contain information for one or more subjects. "
            "For each subject found, identify its name, its units, and the topics for each unit.",
        ),
        (
            "human",
            "Return the subjects found in the syllabus below. Each subject has a name and "
            "an ordered list of units; each unit has a name and an ordered list of topics.\n\n"
            "Syllabus Text:\n{syllabus_text}",
        ),
    ]
)


class StructureParser:
    """Parses raw syllabus text into the authoritative subject structure."""

    def __init__(self, llm: Optional[BaseChatModel] = None, chain: Optional[Runnable] = None) -> None:
        if chain is None:
            if llm is None:
                raise ValueError("StructureParser needs either a chat model or a prepared chain.")
            chain = build_structured_chain(llm, PARSE_PROMPT, ParseSyllabusOutput)
        self._chain = chain

    async def parse(self, syllabus_text: str) -> List[Subject]:
        output = await invoke_structured(self._chain, ParseSyllabusOutput, Stage.PARSING, syllabus_text)
        return output.to_subjects()

    __call__ = parse
