"""
Supabase-backed report store.

Expects three tables: ``reports``, ``ai_summaries`` and ``hba1c_readings``.
"""
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, TypeVar

from pydantic import ValidationError
from supabase import Client, create_client

from glycotrack.api.models.schema_models import HbA1cReading, PriorSummary, ReportSummary, StoredReport
from glycotrack.config.constants import READINGS_TABLE, REPORTS_TABLE, SUMMARIES_TABLE
from glycotrack.config.settings import SupabaseSettings
from glycotrack.errors import StorageError
from glycotrack.hba1c.trend import coerce_date, coerce_value
from glycotrack.storage.base import ReportStore, RowId
from glycotrack.utils.logger import logger

T = TypeVar("T")


def get_supabase_client(settings: SupabaseSettings) -> Client:
    if not settings.configured:
        raise StorageError("SUPABASE_URL and SUPABASE_SERVICE_KEY must both be set")
    return create_client(settings.url, settings.service_key)


def _first_row(response: Any, table: str) -> Dict[str, Any]:
    rows = getattr(response, "data", None) or []
    if not rows:
        raise StorageError(f"Insert into {table} returned no rows")
    return rows[0]


def _coerce_datetime(raw: Any) -> Optional[datetime]:
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, str) and raw.strip():
        try:
            return datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _optional_text(raw: Any) -> Optional[str]:
    return None if raw is None else str(raw)


def reading_from_row(row: Dict[str, Any]) -> HbA1cReading:
    """Build a reading from a stored row; unusable date or value fields become None."""
    value = coerce_value(row.get("value"))
    return HbA1cReading(
        reading_date=coerce_date(row.get("reading_date")),
        value=float(value) if value is not None else None,
    )


def summary_from_row(row: Dict[str, Any]) -> PriorSummary:
    """Build a prior summary from a stored row, flattening the joined ``reports`` columns."""
    report = row.get("reports") or {}
    if isinstance(report, list):
        report = report[0] if report else {}
    return PriorSummary(
        id=row.get("id"),
        summary=_optional_text(row.get("summary")),
        advice=_optional_text(row.get("advice")),
        report_id=row.get("report_id"),
        report_date=coerce_date(report.get("report_date")),
        disease=_optional_text(report.get("disease")),
        created_at=_coerce_datetime(row.get("created_at")),
    )


def _map_rows(rows: Any, mapper: Callable[[Dict[str, Any]], T], table: str) -> List[T]:
    try:
        return [mapper(row) for row in rows or []]
    except (ValidationError, TypeError, AttributeError) as e:
        logger.error(f"Unreadable row in {table}: {str(e)}")
        raise StorageError(f"Unreadable row in {table}: {str(e)}") from e


def _map_row(row: Dict[str, Any], mapper: Callable[[Dict[str, Any]], T], table: str) -> T:
    return _map_rows([row], mapper, table)[0]


class SupabaseReportStore(ReportStore):
    """Report store over a Supabase (PostgREST) project."""

    def __init__(self, client: Client):
        self.client = client

    def _execute(self, query: Any, action: str) -> Any:
        try:
            return query.execute()
        except Exception as e:
            logger.error(f"Supabase {action} failed: {str(e)}")
            raise StorageError(f"Supabase {action} failed: {str(e)}") from e

    def save_report(
        self, disease: Optional[str], age: Optional[int], report_text: str, report_date: date
    ) -> StoredReport:
        response = self._execute(
            self.client.table(REPORTS_TABLE).insert(
                {
                    "disease": disease,
                    "age": age,
                    "report_text": report_text,
                    "report_date": report_date.isoformat(),
                }
            ),
            "report insert",
        )
        return _map_row(_first_row(response, REPORTS_TABLE), StoredReport.model_validate, REPORTS_TABLE)

    def save_summary(self, report_id: Optional[RowId], summary: ReportSummary) -> PriorSummary:
        response = self._execute(
            self.client.table(SUMMARIES_TABLE).insert(
                {"report_id": report_id, "summary": summary.summary, "advice": summary.advice}
            ),
            "summary insert",
        )
        return _map_row(_first_row(response, SUMMARIES_TABLE), summary_from_row, SUMMARIES_TABLE)

    def save_reading(
        self,
        report_id: Optional[RowId],
        summary_id: Optional[RowId],
        disease: Optional[str],
        reading_date: date,
        value: float,
    ) -> HbA1cReading:
        response = self._execute(
            self.client.table(READINGS_TABLE).insert(
                {
                    "report_id": report_id,
                    "summary_id": summary_id,
                    "disease": disease,
                    "reading_date": reading_date.isoformat(),
                    "value": value,
                }
            ),
            "reading insert",
        )
        return _map_row(_first_row(response, READINGS_TABLE), reading_from_row, READINGS_TABLE)

    def list_readings(self, disease: Optional[str] = None, limit: int = 50) -> List[HbA1cReading]:
        query = self.client.table(READINGS_TABLE).select("reading_date,value")
        if disease:
            query = query.eq("disease", disease)
        query = query.order("reading_date", desc=False).limit(limit)

        response = self._execute(query, "history query")
        return _map_rows(response.data, reading_from_row, READINGS_TABLE)

    def list_recent_summaries(self, limit: int = 5) -> List[PriorSummary]:
        query = (
            self.client.table(SUMMARIES_TABLE)
            .select("id, summary, advice, created_at, report_id, reports!inner(report_date,disease)")
            .order("created_at", desc=True)
            .limit(limit)
        )
        response = self._execute(query, "summaries query")

        return _map_rows(response.data, summary_from_row, SUMMARIES_TABLE)
