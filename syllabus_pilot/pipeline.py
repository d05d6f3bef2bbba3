"""Submission pipeline: validate input, extract text, parse and summarize concurrently."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Tuple

from .config import PilotConfig
from .errors import InputError, Stage, SyllabusPilotError, UpstreamError
from .extractor import TextExtractor
from .llm import build_chat_model
from .session import SyllabusSession
from .store import ProgressStore
from .structure_parser import StructureParser
from .summarizer import SyllabusSummarizer
from .types import RawDocument, Subject, SyllabusSummary


logger = logging.getLogger(__name__)

ParseFn = Callable[[str], Awaitable[List[Subject]]]
SummarizeFn = Callable[[str], Awaitable[SyllabusSummary]]


@dataclass(frozen=True)
class Submission:
    """Either pasted text or an uploaded document."""

    text: Optional[str] = None
    document: Optional[RawDocument] = None


class SyllabusPipeline:
    """Runs one submission through extraction and both AI calls.

    Join policy: both AI calls are always allowed to settle. If either
    failed, the error of the call that failed first is raised and the other
    failure is only logged.
    """

    def __init__(
        self,
        parser: ParseFn,
        summarizer: SummarizeFn,
        extractor: Optional[TextExtractor] = None,
        store: Optional[ProgressStore] = None,
    ) -> None:
        self._parser = parser
        self._summarizer = summarizer
        self._extractor = extractor or TextExtractor()
        self._store = store

    @classmethod
    def from_config(cls, config: PilotConfig, store: Optional[ProgressStore] = None) -> "SyllabusPipeline":
        llm = build_chat_model(config)
        return cls(
            parser=StructureParser(llm=llm).parse,
            summarizer=SyllabusSummarizer(llm=llm).summarize,
            extractor=TextExtractor(password=config.pdf_password),
            store=store,
        )

    async def run(
        self,
        session: SyllabusSession,
        submission: Submission,
        user_id: Optional[str] = None,
    ) -> bool:
        """Process a submission. Returns False when the result was superseded."""
        try:
            self.validate(submission)
        except InputError as exc:
            session.reject_input(exc)
            raise

        generation = session.begin()
        try:
            syllabus_text = await self.extract_text(submission)
            subjects, summary = await self.parse_and_summarize(syllabus_text)
        except SyllabusPilotError as exc:
            if not session.fail(generation, exc):
                return False
            raise
        except Exception as exc:
            logger.exception("Unexpected failure while processing submission %d", generation)
            wrapped = SyllabusPilotError(f"Unexpected error while processing the syllabus: {exc}")
            if not session.fail(generation, wrapped):
                return False
            raise

        if not session.complete(generation, syllabus_text, subjects, summary):
            return False
        if self._store is not None and user_id:
            self._store.save(user_id, session.snapshot())
        return True

    @staticmethod
    def validate(submission: Submission) -> None:
        if submission.document is not None:
            if not submission.document.content:
                raise InputError("The selected file is empty.")
            return
        if submission.text is None:
            raise InputError("No syllabus text or file was provided.")
        if not submission.text.strip():
            raise InputError("Syllabus text cannot be empty.")

    async def extract_text(self, submission: Submission) -> str:
        if submission.document is None:
            return submission.text
        return await asyncio.to_thread(self._extractor.extract, submission.document)

    async def parse_and_summarize(self, syllabus_text: str) -> Tuple[List[Subject], SyllabusSummary]:
        settled: List[asyncio.Task] = []
        parse_task = asyncio.create_task(self._guard(self._parser, Stage.PARSING, syllabus_text))
        summary_task = asyncio.create_task(self._guard(self._summarizer, Stage.SUMMARIZATION, syllabus_text))
        for task in (parse_task, summary_task):
            task.add_done_callback(settled.append)

        try:
            await asyncio.wait((parse_task, summary_task))
        except asyncio.CancelledError:
            parse_task.cancel()
            summary_task.cancel()
            raise

        failures = [task.exception() for task in settled if task.exception() is not None]
        if failures:
            for other in failures[1:]:
                logger.error("Additional failure while processing syllabus: %s", other)
            raise failures[0]
        return parse_task.result(), summary_task.result()

    @staticmethod
    async def _guard(call, stage: Stage, syllabus_text: str):
        try:
            return await call(syllabus_text)
        except UpstreamError:
            raise
        except Exception as exc:
            logger.error("%s failed: %s", stage.value, exc)
            raise UpstreamError(stage, str(exc) or type(exc).__name__) from exc
