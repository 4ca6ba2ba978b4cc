"""
In-memory report store, used when no database is configured and in tests.
"""
import itertools
import threading
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from glycotrack.api.models.schema_models import HbA1cReading, PriorSummary, ReportSummary, StoredReport
from glycotrack.storage.base import ReportStore, RowId


class InMemoryReportStore(ReportStore):
    """Keeps rows in process memory. Safe to share between request handlers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self.reports: Dict[int, StoredReport] = {}
        self.summaries: List[PriorSummary] = []
        self.readings: List[Dict[str, Any]] = []

    def save_report(
        self, disease: Optional[str], age: Optional[int], report_text: str, report_date: date
    ) -> StoredReport:
        with self._lock:
            report = StoredReport(
                id=next(self._ids), disease=disease, age=age, report_text=report_text, report_date=report_date
            )
            self.reports[report.id] = report
            return report

    def save_summary(self, report_id: Optional[RowId], summary: ReportSummary) -> PriorSummary:
        with self._lock:
            report = self.reports.get(report_id) if report_id is not None else None
            row = PriorSummary(
                id=next(self._ids),
                summary=summary.summary,
                advice=summary.advice,
                report_id=report_id,
                report_date=report.report_date if report else None,
                disease=report.disease if report else None,
                created_at=datetime.now(timezone.utc),
            )
            self.summaries.append(row)
            return row

    def save_reading(
        self,
        report_id: Optional[RowId],
        summary_id: Optional[RowId],
        disease: Optional[str],
        reading_date: date,
        value: float,
    ) -> HbA1cReading:
        with self._lock:
            self.readings.append(
                {
                    "id": next(self._ids),
                    "report_id": report_id,
                    "summary_id": summary_id,
                    "disease": disease,
                    "reading": HbA1cReading(reading_date=reading_date, value=value),
                }
            )
            return self.readings[-1]["reading"]

    def list_readings(self, disease: Optional[str] = None, limit: int = 50) -> List[HbA1cReading]:
        with self._lock:
            rows = [r for r in self.readings if not disease or r["disease"] == disease]
        rows.sort(key=lambda r: r["reading"].reading_date)
        return [r["reading"] for r in rows[:limit]]

    def list_recent_summaries(self, limit: int = 5) -> List[PriorSummary]:
        with self._lock:
            # Mirrors the inner join with reports: summaries without a report are skipped
            rows = [s for s in self.summaries if s.report_id is not None]
        rows.sort(key=lambda s: (s.created_at, s.id), reverse=True)
        return rows[:limit]
