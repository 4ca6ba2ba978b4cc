"""
Report Store Interface

Persistence contract for reports, AI summaries and HbA1c readings. Store
implementations are synchronous; async callers run them in a threadpool.
"""
from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional, Union

from glycotrack.api.models.schema_models import HbA1cReading, PriorSummary, ReportSummary, StoredReport

RowId = Union[int, str]


class ReportStore(ABC):
    """Abstract persistence layer. Every method raises ``StorageError`` on failure."""

    @abstractmethod
    def save_report(
        self, disease: Optional[str], age: Optional[int], report_text: str, report_date: date
    ) -> StoredReport:
        """Persist an uploaded report and return it with its identifier."""

    @abstractmethod
    def save_summary(self, report_id: Optional[RowId], summary: ReportSummary) -> PriorSummary:
        """Persist the AI summary generated for a report."""

    @abstractmethod
    def save_reading(
        self,
        report_id: Optional[RowId],
        summary_id: Optional[RowId],
        disease: Optional[str],
        reading_date: date,
        value: float,
    ) -> HbA1cReading:
        """Persist a detected HbA1c reading."""

    @abstractmethod
    def list_readings(self, disease: Optional[str] = None, limit: int = 50) -> List[HbA1cReading]:
        """Return readings oldest first, optionally restricted to one disease label."""

    @abstractmethod
    def list_recent_summaries(self, limit: int = 5) -> List[PriorSummary]:
        """Return stored summaries newest first."""
