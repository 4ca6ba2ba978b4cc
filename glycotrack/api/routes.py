from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool

from glycotrack.api.models.schema_models import TrendRequest, TrendResponse, UploadReportResponse
from glycotrack.errors import LLMConfigurationError, LLMServiceError, PdfExtractionError
from glycotrack.hba1c.trend import coerce_date
from glycotrack.services.pdf_text import extract_pdf_text
from glycotrack.services.report_pipeline import ReportPipeline
from glycotrack.utils.logger import logger

router = APIRouter()


def get_pipeline(request: Request) -> ReportPipeline:
    """Return the pipeline built at startup."""
    return request.app.state.pipeline


def parse_report_date(raw: Optional[str]) -> date:
    if not raw or not raw.strip():
        raise HTTPException(status_code=400, detail="Report date is required")
    parsed = coerce_date(raw)
    if parsed is None:
        raise HTTPException(status_code=400, detail="Report date is invalid")
    return parsed


def parse_age(raw: Optional[str]) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    try:
        age = int(raw.strip())
    except ValueError:
        raise HTTPException(status_code=400, detail="Age must be a whole number")
    if age < 0:
        raise HTTPException(status_code=400, detail="Age must not be negative")
    return age


@router.post("/upload-report", response_model=UploadReportResponse)
async def upload_report(
    report: Optional[UploadFile] = File(None),
    age: Optional[str] = Form(None),
    disease: Optional[str] = Form(None),
    report_date: Optional[str] = Form(None, alias="reportDate"),
    pipeline: ReportPipeline = Depends(get_pipeline),
) -> UploadReportResponse:
    """
    Upload a PDF report, summarize it and return the HbA1c trend.

    Args:
        report: The PDF file to be processed
        age: Patient age
        disease: Disease label, also used to scope the HbA1c history
        report_date: Date printed on the report (YYYY-MM-DD)

    Returns:
        Summary, advice, detected HbA1c value, reading history and trend narrative
    """
    if report is None or not report.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    parsed_date = parse_report_date(report_date)
    parsed_age = parse_age(age)

    if not report.filename.lower().endswith('.pdf'):
        logger.warning(f"Invalid file type attempted: {report.filename}")
        raise HTTPException(status_code=400, detail="Only PDF files are supported")

    logger.info(f"Processing file: {report.filename}")
    contents = await report.read()

    try:
        pdf = await run_in_threadpool(extract_pdf_text, contents)
    except PdfExtractionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        return await pipeline.process(
            report_text=pdf.text,
            report_date=parsed_date,
            disease=disease or None,
            age=parsed_age,
        )
    except (LLMServiceError, LLMConfigurationError) as e:
        logger.error(f"Error generating summary: {str(e)}")
        raise HTTPException(status_code=502, detail="Error generating summary")
    except Exception as e:
        logger.error(f"Error processing report: {str(e)}")
        raise HTTPException(status_code=500, detail="Server error")


@router.get("/hba1c/history", response_model=TrendResponse)
async def hba1c_history(
    disease: Optional[str] = None,
    pipeline: ReportPipeline = Depends(get_pipeline),
) -> TrendResponse:
    """Return stored HbA1c readings, oldest first, with a computed trend narrative."""
    return await pipeline.history(disease or None)


@router.post("/hba1c/trend-summary", response_model=TrendResponse)
async def hba1c_trend_summary(
    request: TrendRequest,
    pipeline: ReportPipeline = Depends(get_pipeline),
) -> TrendResponse:
    """
    Return an LLM-written overview of the HbA1c history.

    The computed narrative is returned instead when the LLM is unavailable;
    ``source`` tells which one was used.
    """
    return await pipeline.llm_trend(request.disease or None)
