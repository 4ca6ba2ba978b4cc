"""
Report Pipeline

Orchestrates a report upload: HbA1c detection, persistence, LLM summary and
trend narrative. Storage failures are logged and the pipeline carries on
with what it has; a failed LLM call aborts the upload.
"""
from datetime import date
from typing import Any, Callable, List, Optional, TypeVar

from fastapi.concurrency import run_in_threadpool

from glycotrack.api.models.schema_models import (
    HbA1cReading,
    PriorSummary,
    TrendResponse,
    UploadReportResponse,
)
from glycotrack.config.constants import DEFAULT_HBA1C_HISTORY_LIMIT, DEFAULT_SUMMARY_HISTORY_LIMIT
from glycotrack.errors import GlycotrackError, StorageError
from glycotrack.hba1c import build_trend_summary, extract_hba1c_value, find_hba1c_candidates
from glycotrack.llm.anthropic_client import ReportSummarizer
from glycotrack.storage.base import ReportStore
from glycotrack.utils.logger import logger

T = TypeVar("T")


class ReportPipeline:
    """Runs the upload flow against a report store and an LLM summarizer."""

    def __init__(
        self,
        store: ReportStore,
        summarizer: ReportSummarizer,
        history_limit: int = DEFAULT_HBA1C_HISTORY_LIMIT,
        summaries_limit: int = DEFAULT_SUMMARY_HISTORY_LIMIT,
    ):
        self.store = store
        self.summarizer = summarizer
        self.history_limit = history_limit
        self.summaries_limit = summaries_limit

    async def _store_call(self, action: str, default: T, func: Callable[..., T], *args: Any) -> T:
        try:
            return await run_in_threadpool(func, *args)
        except StorageError as e:
            logger.error(f"Failed to {action}: {str(e)}")
            return default

    async def _load_history(self, disease: Optional[str]) -> List[HbA1cReading]:
        return await self._store_call(
            "fetch HbA1c history", [], self.store.list_readings, disease, self.history_limit
        )

    async def _load_summaries(self) -> List[PriorSummary]:
        return await self._store_call(
            "fetch previous summaries", [], self.store.list_recent_summaries, self.summaries_limit
        )

    async def process(
        self,
        report_text: str,
        report_date: date,
        disease: Optional[str] = None,
        age: Optional[int] = None,
    ) -> UploadReportResponse:
        """
        Process the text of an uploaded report.

        Args:
            report_text: Text extracted from the report
            report_date: Date the report was issued
            disease: Optional disease label; also scopes the reading history
            age: Optional patient age

        Returns:
            The combined summary, advice, reading history and trend narrative
        """
        candidates = find_hba1c_candidates(report_text)
        hba1c_value = extract_hba1c_value(report_text)
        if len(candidates) > 1:
            logger.debug(f"Multiple HbA1c candidates found {candidates}, using {hba1c_value}")
        logger.info(f"HbA1c detected: {hba1c_value if hba1c_value is not None else 'none'}")

        report = await self._store_call(
            "save report", None, self.store.save_report, disease, age, report_text, report_date
        )
        report_id = report.id if report else None

        summary = await self.summarizer.get_report_summary(disease, age, report_text)

        summary_row = await self._store_call("save AI summary", None, self.store.save_summary, report_id, summary)
        summary_id = summary_row.id if summary_row else None

        if hba1c_value is not None:
            await self._store_call(
                "save HbA1c reading",
                None,
                self.store.save_reading,
                report_id,
                summary_id,
                disease,
                report_date,
                hba1c_value,
            )

        history = await self._load_history(disease)
        previous_summaries = await self._load_summaries()

        return UploadReportResponse(
            summary=summary.summary,
            advice=summary.advice,
            report_date=report_date,
            hba1c_value=hba1c_value,
            hba1c_history=history,
            trend_summary=build_trend_summary(history, previous_summaries),
            previous_summaries=previous_summaries,
        )

    async def history(self, disease: Optional[str] = None) -> TrendResponse:
        """Return the stored readings with a computed trend narrative."""
        history = await self._load_history(disease)
        previous_summaries = await self._load_summaries()
        return TrendResponse(
            hba1c_history=history,
            trend_summary=build_trend_summary(history, previous_summaries),
            source="computed",
        )

    async def llm_trend(self, disease: Optional[str] = None) -> TrendResponse:
        """
        Ask the LLM for a trend overview of the stored readings.

        Degrades to the computed narrative when there is no history or the
        LLM call fails.
        """
        history = await self._load_history(disease)
        previous_summaries = await self._load_summaries()
        if not history:
            return TrendResponse(
                hba1c_history=history,
                trend_summary=build_trend_summary(history, previous_summaries),
                source="computed",
            )

        try:
            text = await self.summarizer.get_trend_summary(disease, history, previous_summaries)
        except GlycotrackError as e:
            logger.warning(f"LLM trend summary unavailable, using computed trend: {str(e)}")
            return TrendResponse(
                hba1c_history=history,
                trend_summary=build_trend_summary(history, previous_summaries),
                source="computed",
            )

        return TrendResponse(hba1c_history=history, trend_summary=text, source="llm")
