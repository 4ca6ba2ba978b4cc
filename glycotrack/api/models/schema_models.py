from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class HbA1cReading(BaseModel):
    """A single dated HbA1c percentage."""

    reading_date: Optional[date] = Field(None, description="Date of the report the reading came from")
    value: Optional[float] = Field(None, description="HbA1c percentage")


class PriorSummary(BaseModel):
    """A previously generated AI summary, as stored alongside its report."""

    id: Optional[Union[int, str]] = Field(None, description="Summary identifier")
    summary: Optional[str] = Field(None, description="Summary text")
    advice: Optional[str] = Field(None, description="Advice text")
    report_id: Optional[Union[int, str]] = Field(None, description="Identifier of the associated report")
    report_date: Optional[date] = Field(None, description="Date of the associated report")
    disease: Optional[str] = Field(None, description="Disease label of the associated report")
    created_at: Optional[datetime] = Field(None, description="When the summary was stored")


class ReportSummary(BaseModel):
    """Patient-friendly summary and advice produced by the LLM."""

    summary: str = Field("", description="Summary of the report")
    advice: str = Field("", description="Short advice items as a single string")


class StoredReport(BaseModel):
    """A report row as persisted."""

    id: Optional[Union[int, str]] = None
    disease: Optional[str] = None
    age: Optional[int] = None
    report_text: str = ""
    report_date: date


class UploadReportResponse(BaseModel):
    """Combined response returned after a report upload."""

    model_config = ConfigDict(populate_by_name=True)

    summary: str = Field(..., description="AI summary of the report")
    advice: str = Field(..., description="AI advice for the patient")
    report_date: date = Field(..., alias="reportDate", description="Date of the uploaded report")
    hba1c_value: Optional[float] = Field(None, alias="hba1cValue", description="HbA1c detected in the report")
    hba1c_history: List[HbA1cReading] = Field(
        default_factory=list, alias="hba1cHistory", description="Stored readings, oldest first"
    )
    trend_summary: str = Field(..., alias="trendSummary", description="Narrative of how readings changed")
    previous_summaries: List[PriorSummary] = Field(
        default_factory=list, alias="previousSummaries", description="Most recent stored summaries, newest first"
    )


class TrendRequest(BaseModel):
    """Request body for an LLM-written trend overview."""

    disease: Optional[str] = Field(None, description="Restrict history to this disease label")


class TrendResponse(BaseModel):
    """Reading history together with a trend narrative."""

    model_config = ConfigDict(populate_by_name=True)

    hba1c_history: List[HbA1cReading] = Field(default_factory=list, alias="hba1cHistory")
    trend_summary: str = Field(..., alias="trendSummary")
    source: str = Field("computed", description="'computed' or 'llm', depending on who wrote the text")
