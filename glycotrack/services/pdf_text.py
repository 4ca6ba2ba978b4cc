import io
from typing import Any, Dict

import pdfplumber
from pydantic import BaseModel, Field

from glycotrack.errors import PdfExtractionError
from glycotrack.utils.logger import logger
from glycotrack.utils.timing import timing_decorator


class PdfText(BaseModel):
    """Text and metadata pulled out of a PDF."""

    text: str = Field("", description="Text of all pages, separated by blank lines")
    page_count: int = Field(0, description="Number of pages in the document")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="PDF document metadata")


@timing_decorator
def extract_pdf_text(contents: bytes) -> PdfText:
    """
    Extract the text content of a PDF.
    
    Args:
        contents: Raw bytes of the uploaded file
        
    Returns:
        The extracted text, page count and metadata

    Raises:
        PdfExtractionError: If the bytes cannot be opened as a PDF
    """
    try:
        with pdfplumber.open(io.BytesIO(contents)) as pdf:
            metadata = {k: str(v) for k, v in (pdf.metadata or {}).items()}
            extracted_text = ""

            for page in pdf.pages:
                page_text = page.extract_text() or ""
                extracted_text += page_text + "\n\n"

            page_count = len(pdf.pages)
    except Exception as e:
        logger.error(f"Error reading PDF: {str(e)}")
        raise PdfExtractionError(f"Could not read PDF: {str(e)}") from e

    logger.info(f"Extracted text from {page_count} page(s)")
    return PdfText(text=extracted_text, page_count=page_count, metadata=metadata)
