"""Shared plumbing for the structured-output chat model calls."""

from __future__ import annotations

import logging
from typing import Any, Type, TypeVar

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI
from pydantic import BaseModel, ValidationError

from .config import PilotConfig
from .errors import Stage, UpstreamError, UpstreamFormatError


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Leading bytes of binary documents that sometimes come back in place of JSON.
_BINARY_SIGNATURES = ("%PDF", "PK\x03\x04", "\x89PNG")


def build_chat_model(config: PilotConfig) -> ChatOpenAI:
    return ChatOpenAI(
        model=config.model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        api_key=config.require_api_key(),
        base_url=config.base_url.rstrip("/"),
    )


def build_structured_chain(
    llm: BaseChatModel,
    prompt: ChatPromptTemplate,
    schema: Type[BaseModel],
) -> Runnable:
    structured = llm.with_structured_output(schema, method="function_calling", include_raw=True)
    return prompt | structured


async def invoke_structured(
    chain: Runnable,
    schema: Type[ModelT],
    stage: Stage,
    syllabus_text: str,
) -> ModelT:
    """Run a structured-output chain and classify every way it can go wrong."""
    try:
        result = await chain.ainvoke({"syllabus_text": syllabus_text})
    except UpstreamError:
        raise
    except Exception as exc:
        logger.error(
            "%s call failed (syllabus text length %d): %s",
            stage.value,
            len(syllabus_text),
            exc,
        )
        raise UpstreamError(stage, f"The AI service request failed: {exc}") from exc
    return unpack_structured(result, schema, stage, syllabus_text)


def unpack_structured(result: Any, schema: Type[ModelT], stage: Stage, syllabus_text: str = "") -> ModelT:
    if isinstance(result, schema):
        return result
    if isinstance(result, (bytes, bytearray)):
        raise UpstreamFormatError(stage, "Received raw document bytes instead of structured data.")
    if isinstance(result, str):
        raise UpstreamFormatError(stage, f"Received plain text instead of structured data: {_preview(result)}")
    if not isinstance(result, dict):
        raise UpstreamFormatError(stage, f"Unexpected response type {type(result).__name__}.")

    parsed = result.get("parsed")
    raw = result.get("raw")
    parsing_error = result.get("parsing_error")

    if parsed is not None:
        if isinstance(parsed, schema):
            return parsed
        try:
            return schema.model_validate(parsed)
        except ValidationError as exc:
            raise UpstreamFormatError(stage, f"Structured output did not match the expected shape: {exc}") from exc

    raw_text = _raw_content(raw)
    if raw_text.lstrip().startswith(_BINARY_SIGNATURES):
        raise UpstreamFormatError(stage, "Received raw document bytes instead of structured data.")
    if parsing_error is not None:
        raise UpstreamFormatError(
            stage, f"Could not read structured data from the response: {parsing_error}"
        ) from (parsing_error if isinstance(parsing_error, BaseException) else None)
    if raw_text.strip():
        raise UpstreamFormatError(stage, f"Received plain text instead of structured data: {_preview(raw_text)}")

    logger.error(
        "LLM output for %s was empty. Input syllabus text length: %d",
        stage.value,
        len(syllabus_text),
    )
    raise UpstreamError(
        stage,
        "The output was empty. The document might be unparsable or too complex.",
    )


def _raw_content(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, BaseMessage):
        content = raw.content
        if isinstance(content, str):
            return content
        return " ".join(str(part) for part in content)
    return str(raw)


def _preview(text: str, limit: int = 80) -> str:
    text = text.strip().replace("\n", " ")
    return text if len(text) <= limit else f"{text[:limit]}..."
