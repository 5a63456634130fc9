"""
Interview analysis service - sends transcripts and Q/A pairs to Claude.

This service has two jobs:
1. extract_qa(): transcript text -> list of {question, answer}
2. evaluate():   list of {question, answer} -> evaluation object
   {results: [...], overall_score, summary}

Key Anthropic API details:
- Model and temperature come from settings (low temperature keeps
  scoring reproducible between runs)
- The instructions go in the system prompt, the data in the user message
- Both calls ask for JSON only; we still strip markdown fences because
  the model occasionally wraps its answer anyway

Both methods are BLOCKING (the Anthropic SDK is synchronous). Routers
run them through asyncio.to_thread() so the event loop stays free.
"""

import json
import logging
import re
import time

import anthropic

from interview_analyzer.config import settings
from interview_analyzer.services.errors import UpstreamServiceError
from interview_analyzer.services.prompts import (
    EVALUATION_SYSTEM_PROMPT,
    EXTRACTION_SYSTEM_PROMPT,
    build_evaluation_prompt,
    build_extraction_prompt,
)

logger = logging.getLogger(__name__)

# Keys the model has been seen to use for the Q/A array, in preference order
QA_LIST_KEYS = ("qa_pairs", "questions", "items")


class AnalysisService:
    """Wraps the Anthropic SDK for Q/A extraction and answer scoring.

    Usage:
        service = AnalysisService()
        qa_items = service.extract_qa(transcript_text)
        evaluation = service.evaluate(qa_items)
        print(evaluation["overall_score"])
    """

    def __init__(self, client=None):
        if client is None:
            if not settings.ANTHROPIC_API_KEY:
                raise UpstreamServiceError(
                    "Analysis service is not configured",
                    "ANTHROPIC_API_KEY is not set",
                )
            client = anthropic.Anthropic(api_key=settings.ANTHROPIC_API_KEY)
        self.client = client
        self.model = settings.ANTHROPIC_MODEL

    def extract_qa(self, transcription: str) -> list[dict]:
        """Pull question/answer pairs out of a transcript.

        Returns an empty list when the model finds nothing; the caller
        decides whether that is an error.
        """
        logger.info("Extracting Q/A from transcription (%d chars)", len(transcription))
        data = self._complete_json(
            EXTRACTION_SYSTEM_PROMPT,
            build_extraction_prompt(transcription),
            "Failed to extract Q/A",
        )
        qa_items = parse_qa_items(data)
        logger.info("Extracted %d Q/A pairs", len(qa_items))
        return qa_items

    def evaluate(self, qa_items: list[dict]) -> dict:
        """Score each Q/A pair and return the evaluation object."""
        logger.info("Evaluating %d Q/A pairs", len(qa_items))
        data = self._complete_json(
            EVALUATION_SYSTEM_PROMPT,
            build_evaluation_prompt(qa_items),
            "Failed to evaluate interview",
        )
        if not isinstance(data, dict):
            raise UpstreamServiceError(
                "Failed to evaluate interview",
                "Model response was not a JSON object",
            )
        return data

    # ------------------------------------------------------------------
    # HELPERS
    # ------------------------------------------------------------------

    def _complete_json(self, system: str, user_prompt: str, error_message: str):
        """Run one completion and parse its text as JSON."""
        start_time = time.time()
        try:
            message = self.client.messages.create(
                model=self.model,
                max_tokens=settings.ANTHROPIC_MAX_TOKENS,
                temperature=settings.LLM_TEMPERATURE,
                system=system,
                messages=[
                    {"role": "user", "content": user_prompt}
                ],
            )
        except anthropic.APIError as e:
            logger.exception("Anthropic request failed")
            raise UpstreamServiceError(error_message, str(e)) from e

        logger.info("Received response from %s in %.1fs", self.model, time.time() - start_time)
        text = message.content[0].text if message.content else ""
        try:
            return parse_json_response(text)
        except ValueError as e:
            logger.error("Could not parse model response as JSON: %.200s", text)
            raise UpstreamServiceError(error_message, str(e)) from e


def parse_json_response(text: str):
    """Parse model output as JSON, tolerating ```json fences around it."""
    cleaned = text.strip()
    fence = re.search(r"```(?:json)?\s*(.*?)```", cleaned, re.DOTALL)
    if fence:
        cleaned = fence.group(1).strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in model response: {e.msg}") from e


def parse_qa_items(data) -> list[dict]:
    """Find the Q/A array in whatever shape the model returned.

    Accepts {"qa_pairs": [...]}, {"questions": [...]}, {"items": [...]},
    a bare list, or failing those the first list value in the object.
    """
    if isinstance(data, list):
        return data
    if not isinstance(data, dict):
        return []

    for key in QA_LIST_KEYS:
        if isinstance(data.get(key), list):
            return data[key]

    return next((value for value in data.values() if isinstance(value, list)), [])
