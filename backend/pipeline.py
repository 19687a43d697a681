"""Improve → summarize, then an optional parallel translation of both results."""

import asyncio
import logging
import re
from typing import Optional

from pydantic import BaseModel, model_validator

from errors import ErrorKind, LocalInputError, TranscriptError
from log_setup import new_run_id, preview
from prompts import (
    IMPROVE_EMPTY,
    SUMMARY_EMPTY,
    TRANSLATE_EMPTY,
    build_improve_prompt,
    build_summary_prompt,
    build_translate_prompt,
)

logger = logging.getLogger("transcript_refiner")

# [00:00:05] or 0:05 / 12:34 at a line start, plus one optional trailing space
TIMESTAMP_RE = re.compile(r"^(\[\d{2}:\d{2}:\d{2}\]|\d{1,2}:\d{2}) ?", re.MULTILINE)


class ProcessedResult(BaseModel):
    improved_text: str
    summary: str
    translated_improved_text: Optional[str] = None
    translated_summary: Optional[str] = None

    @model_validator(mode="after")
    def translations_come_in_pairs(self):
        if (self.translated_improved_text is None) != (self.translated_summary is None):
            raise ValueError("translated fields must be set together")
        return self

    @property
    def is_translated(self) -> bool:
        return self.translated_improved_text is not None

    def with_translations(self, improved_text: str, summary: str) -> "ProcessedResult":
        return self.model_copy(
            update={
                "translated_improved_text": improved_text,
                "translated_summary": summary,
            }
        )


def normalize_transcript(text: str) -> str:
    """Strips timestamp markers at line starts, then surrounding whitespace."""
    return TIMESTAMP_RE.sub("", text).strip()


class TranscriptPipeline:
    def __init__(self, client, target_language: str):
        self.client = client
        self.target_language = target_language

    async def run_stage1(self, text: str, credential: Optional[str]) -> ProcessedResult:
        run_id = new_run_id()
        normalized = normalize_transcript(text or "")
        if not normalized:
            raise LocalInputError("Please paste some text to process.")

        logger.info(f"[{run_id}] Improving {len(normalized)} chars")
        improved = await self.client.invoke(
            build_improve_prompt(normalized), credential, empty_message=IMPROVE_EMPTY
        )
        logger.debug(f"[{run_id}] Improved: {preview(improved)}")

        # Summarize the improved text, not the raw input
        logger.info(f"[{run_id}] Summarizing {len(improved)} chars")
        summary = await self.client.invoke(
            build_summary_prompt(improved), credential, empty_message=SUMMARY_EMPTY
        )
        logger.debug(f"[{run_id}] Summary: {preview(summary)}")

        return ProcessedResult(improved_text=improved, summary=summary)

    async def translate(self, text: str, credential: Optional[str]) -> str:
        return await self.client.invoke(
            build_translate_prompt(text, self.target_language),
            credential,
            empty_message=TRANSLATE_EMPTY,
        )

    async def run_stage2(self, result: ProcessedResult, credential: Optional[str]) -> ProcessedResult:
        """Translates both fields concurrently; all or nothing.

        Both calls are awaited to completion before a failure is raised, and
        an invalid-credential failure takes precedence over any other.
        """
        run_id = new_run_id()
        logger.info(f"[{run_id}] Translating both results into {self.target_language}")

        outcomes = await asyncio.gather(
            self.translate(result.improved_text, credential),
            self.translate(result.summary, credential),
            return_exceptions=True,
        )

        failures = [o for o in outcomes if isinstance(o, BaseException)]
        if failures:
            for failure in failures:
                if isinstance(failure, TranscriptError) and failure.kind is ErrorKind.INVALID_CREDENTIAL:
                    raise failure
            raise failures[0]

        translated_improved, translated_summary = outcomes
        logger.info(f"[{run_id}] Translation done")
        return result.with_translations(translated_improved, translated_summary)
