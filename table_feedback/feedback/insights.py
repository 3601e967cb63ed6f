"""LLM-backed sentiment and insight generation for feedback comments"""
import asyncio
import json
import logging
import re
from typing import Optional, Sequence

import httpx
from fastapi import Depends
from pydantic import ValidationError

from table_feedback.config import AppConfig, get_config
from table_feedback.feedback.exceptions import InsightGenerationError
from table_feedback.feedback.schemas import FeedbackAnalysis, RatingItem

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY = "Unable to analyze feedback due to an error."

PROMPT_TEMPLATE = """
You are an AI tasked with analyzing customer feedback and ratings for a restaurant table.
Given the following:
- Feedback: "{feedback}"
- Ratings (1=Worst, 2=Average, 3=Excellent): {ratings}

Provide a response in JSON format with the following structure:
{{
  "sentiment": "positive/neutral/negative",
  "summary": "A concise summary of the feedback",
  "actionableInsights": ["Insight 1", "Insight 2", ...]
}}

The actionable insights should be specific suggestions based on the feedback text and ratings,
e.g. "Play quieter music in the evening", "Add more vegan options".
Ensure the response is valid JSON without Markdown formatting (e.g., no ```json markers).
"""

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)


def fallback_analysis() -> FeedbackAnalysis:
    """Neutral analysis used whenever the LLM cannot be used"""
    return FeedbackAnalysis(sentiment="neutral", summary=FALLBACK_SUMMARY, actionable_insights=[])


def build_prompt(feedback_text: str, ratings: Sequence[RatingItem]) -> str:
    ratings_json = json.dumps([{"service": r.service, "rating": r.rating} for r in ratings])
    return PROMPT_TEMPLATE.format(feedback=feedback_text, ratings=ratings_json)


def strip_code_fences(text: str) -> str:
    """Remove ```json ... ``` wrapping the model sometimes adds."""
    text = text.strip()
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    # Unterminated fence: drop the opening marker only
    if text.startswith("```"):
        return re.sub(r"^```(?:json)?", "", text, flags=re.IGNORECASE).strip()
    return text


def parse_analysis(text: str) -> FeedbackAnalysis:
    """
    Parse the model's reply into a FeedbackAnalysis.

    Raises:
        InsightGenerationError: if the reply is not JSON of the expected shape
    """
    try:
        payload = json.loads(strip_code_fences(text))
    except ValueError as e:
        raise InsightGenerationError(f"Response is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise InsightGenerationError("Response JSON is not an object")
    try:
        return FeedbackAnalysis.model_validate(payload)
    except ValidationError as e:
        raise InsightGenerationError(f"Response JSON has the wrong shape: {e}") from e


class InsightGenerator:
    """Client for an Ollama-compatible /api/generate endpoint"""

    def __init__(
        self,
        url: str,
        model: str,
        timeout: float = 30.0,
        enabled: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.model = model
        self.timeout = timeout
        self.enabled = enabled
        self.transport = transport

    @classmethod
    def from_config(cls, config: AppConfig) -> "InsightGenerator":
        return cls(
            url=config.llm_url,
            model=config.llm_model,
            timeout=config.llm_timeout_seconds,
            enabled=config.llm_enabled,
        )

    async def _complete(self, prompt: str) -> str:
        payload = {"model": self.model, "prompt": prompt, "stream": False}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            r = await client.post(self.url, json=payload)
            r.raise_for_status()
            try:
                body = r.json()
            except ValueError as e:
                raise InsightGenerationError(f"LLM reply is not JSON: {e}") from e
        text = body.get("response") if isinstance(body, dict) else None
        if not isinstance(text, str):
            raise InsightGenerationError("LLM reply has no 'response' text")
        return text

    async def analyze(self, feedback_text: str, ratings: Sequence[RatingItem]) -> FeedbackAnalysis:
        """
        Ask the LLM for sentiment, a summary and actionable insights.

        Never raises: any network, HTTP or parsing problem yields the
        fallback analysis.
        """
        if not self.enabled:
            return fallback_analysis()

        try:
            # httpx timeouts apply per phase; bound the whole exchange as well
            raw = await asyncio.wait_for(self._complete(build_prompt(feedback_text, ratings)), self.timeout)
            logger.debug(f"LLM raw response: {raw}")
            return parse_analysis(raw)
        except (httpx.HTTPError, httpx.InvalidURL, asyncio.TimeoutError, InsightGenerationError) as e:
            logger.warning(f"Feedback analysis failed, using fallback: {e}")
            return fallback_analysis()


def get_insight_generator(config: AppConfig = Depends(get_config)) -> InsightGenerator:
    """Dependency to get the insight generator."""
    return InsightGenerator.from_config(config)
