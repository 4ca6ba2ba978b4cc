from datetime import date
from typing import List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from glycotrack.api.models.schema_models import HbA1cReading, PriorSummary, ReportSummary
from glycotrack.api.routes import get_pipeline
from glycotrack.config.settings import Settings
from glycotrack.errors import LLMServiceError
from glycotrack.main import create_app
from glycotrack.services.report_pipeline import ReportPipeline
from glycotrack.storage.memory_store import InMemoryReportStore


class FakeSummarizer:
    """Records calls and returns canned answers instead of calling the LLM."""

    def __init__(self, fail: bool = False, trend_text: str = "Readings are going up slowly."):
        self.fail = fail
        self.trend_text = trend_text
        self.report_calls: List[tuple] = []
        self.trend_calls: List[tuple] = []

    async def get_report_summary(self, disease: Optional[str], age: Optional[int], report_text: str) -> ReportSummary:
        self.report_calls.append((disease, age, report_text))
        if self.fail:
            raise LLMServiceError("Anthropic request failed: 529 overloaded", status_code=529)
        return ReportSummary(summary="Blood sugar is slightly high.", advice="Walk daily.")

    async def get_trend_summary(
        self,
        disease: Optional[str],
        history: Sequence[HbA1cReading],
        previous_summaries: Sequence[PriorSummary],
    ) -> str:
        self.trend_calls.append((disease, list(history), list(previous_summaries)))
        if self.fail:
            raise LLMServiceError("Anthropic trend request failed: 500", status_code=500)
        return self.trend_text


@pytest.fixture
def store() -> InMemoryReportStore:
    return InMemoryReportStore()


@pytest.fixture
def summarizer() -> FakeSummarizer:
    return FakeSummarizer()


@pytest.fixture
def pipeline(store, summarizer) -> ReportPipeline:
    return ReportPipeline(store=store, summarizer=summarizer)


@pytest.fixture
def client(pipeline):
    app = create_app(Settings())
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def seeded_store(store) -> InMemoryReportStore:
    for reading_date, value in [(date(2024, 6, 1), 7.5), (date(2024, 1, 1), 6.0)]:
        report = store.save_report("diabetes", 50, f"HbA1c: {value}", reading_date)
        summary = store.save_summary(report.id, ReportSummary(summary="ok", advice="ok"))
        store.save_reading(report.id, summary.id, "diabetes", reading_date, value)
    return store
