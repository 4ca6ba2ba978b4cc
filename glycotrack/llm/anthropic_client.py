"""
Anthropic Messages API client

Generates patient-friendly report summaries and trend overviews. All
configuration arrives through ``AnthropicSettings``; the client never reads
the environment itself.
"""
import json
import re
from typing import Any, Dict, Optional, Protocol, Sequence

import httpx

from glycotrack.api.models.schema_models import HbA1cReading, PriorSummary, ReportSummary
from glycotrack.api.prompts.report_summary_prompts import (
    REPORT_SUMMARY_SYSTEM_PROMPT,
    REPORT_SUMMARY_USER_PROMPT,
    TREND_SUMMARY_SYSTEM_PROMPT,
    TREND_SUMMARY_USER_PROMPT,
)
from glycotrack.config.constants import (
    ANTHROPIC_MESSAGES_PATH,
    DEFAULT_ADVICE_MESSAGE,
    LLM_TEMPERATURE,
    NO_MODEL_RESPONSE_MESSAGE,
    NO_TREND_SUMMARY_MESSAGE,
    REPORT_SUMMARY_MAX_TOKENS,
    TREND_SUMMARY_MAX_TOKENS,
)
from glycotrack.config.settings import AnthropicSettings
from glycotrack.errors import LLMConfigurationError, LLMServiceError
from glycotrack.utils.logger import logger
from glycotrack.utils.timing import timing_decorator

JSON_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


class ReportSummarizer(Protocol):
    """What the report pipeline needs from an LLM backend."""

    async def get_report_summary(
        self, disease: Optional[str], age: Optional[int], report_text: str
    ) -> ReportSummary:
        ...

    async def get_trend_summary(
        self,
        disease: Optional[str],
        history: Sequence[HbA1cReading],
        previous_summaries: Sequence[PriorSummary],
    ) -> str:
        ...


def parse_json_content(content: str) -> Optional[Dict[str, Any]]:
    """
    Parse a JSON object out of model output.

    Accepts bare JSON or JSON wrapped in a fenced code block. Returns None
    when no JSON object can be recovered.
    """
    candidates = [content]
    match = JSON_BLOCK_PATTERN.search(content)
    if match:
        candidates.append(match.group(1))

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except (json.JSONDecodeError, TypeError):
            continue
        if isinstance(parsed, dict):
            return parsed
    return None


def extract_text_content(result: Dict[str, Any]) -> str:
    """Return the first text block of a Messages API response."""
    blocks = result.get("content") or []
    for block in blocks:
        if isinstance(block, dict) and block.get("type") == "text" and block.get("text"):
            return block["text"]
    if blocks and isinstance(blocks[0], dict):
        return blocks[0].get("text") or ""
    return ""


class AnthropicClient:
    """Thin async wrapper over the Anthropic Messages API."""

    def __init__(self, settings: AnthropicSettings, http_client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=settings.timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> Dict[str, str]:
        return {
            "content-type": "application/json",
            "x-api-key": self.settings.api_key or "",
            "anthropic-version": self.settings.api_version,
        }

    async def _create_message(self, system: str, prompt: str, max_tokens: int) -> str:
        if not self.settings.api_key:
            raise LLMConfigurationError("ANTHROPIC_API_KEY is not configured")

        payload = {
            "model": self.settings.model,
            "max_tokens": max_tokens,
            "temperature": LLM_TEMPERATURE,
            "system": system,
            "messages": [
                {
                    "role": "user",
                    "content": [{"type": "text", "text": prompt}],
                }
            ],
        }
        url = self.settings.base_url.rstrip("/") + ANTHROPIC_MESSAGES_PATH

        try:
            response = await self._client.post(url, headers=self._headers(), json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Error calling Anthropic API: {str(e)}")
            raise LLMServiceError(f"Anthropic request failed: {str(e)}") from e

        if response.status_code != 200:
            logger.error(f"Anthropic API error: {response.status_code} {response.text}")
            raise LLMServiceError(
                f"Anthropic request failed: {response.status_code} {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise LLMServiceError("Anthropic API returned a non-JSON body", status_code=response.status_code) from e

        content = extract_text_content(result)
        logger.debug(f"Raw content from model {self.settings.model}: {content}")
        return content

    @timing_decorator
    async def get_report_summary(
        self, disease: Optional[str], age: Optional[int], report_text: str
    ) -> ReportSummary:
        """
        Summarize a report and produce short advice.

        Falls back to the raw model text as the summary, with generic advice,
        when the model does not answer in JSON.
        """
        prompt = REPORT_SUMMARY_USER_PROMPT.format(
            disease=disease or "unknown",
            age=age if age is not None else "unknown",
            report_text=report_text,
        )
        logger.info(f"Generating report summary with model {self.settings.model}")
        content = await self._create_message(REPORT_SUMMARY_SYSTEM_PROMPT, prompt, REPORT_SUMMARY_MAX_TOKENS)

        parsed = parse_json_content(content)
        if parsed is None:
            logger.warning("Model response was not JSON, using raw text as summary")
            return ReportSummary(
                summary=content.strip() or NO_MODEL_RESPONSE_MESSAGE,
                advice=DEFAULT_ADVICE_MESSAGE,
            )

        advice = parsed.get("advice") or ""
        if isinstance(advice, list):
            advice = "\n".join(str(item) for item in advice)
        return ReportSummary(summary=str(parsed.get("summary") or ""), advice=str(advice))

    @timing_decorator
    async def get_trend_summary(
        self,
        disease: Optional[str],
        history: Sequence[HbA1cReading],
        previous_summaries: Sequence[PriorSummary],
    ) -> str:
        """Ask the model for a 2-3 sentence overview of the reading history."""
        history_text = "\n".join(
            f"- {r.reading_date or 'unknown date'}: HbA1c {r.value if r.value is not None else '?'}%"
            for r in history
        )
        summaries_text = "\n".join(
            f"- {s.report_date or s.created_at or 'unknown date'}: {s.summary or 'no summary'}"
            for s in previous_summaries
        )
        prompt = TREND_SUMMARY_USER_PROMPT.format(
            disease=disease or "unknown",
            history=history_text or "none",
            summaries=summaries_text or "none",
        )
        logger.info(f"Generating trend summary with model {self.settings.model}")
        content = await self._create_message(TREND_SUMMARY_SYSTEM_PROMPT, prompt, TREND_SUMMARY_MAX_TOKENS)

        parsed = parse_json_content(content)
        if parsed is not None and parsed.get("trendSummary"):
            return str(parsed["trendSummary"])
        return content.strip() or NO_TREND_SUMMARY_MESSAGE
