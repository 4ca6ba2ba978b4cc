import pytest

from glycotrack.errors import PdfExtractionError
from glycotrack.services.pdf_text import extract_pdf_text


def test_garbage_bytes_raise_extraction_error():
    with pytest.raises(PdfExtractionError):
        extract_pdf_text(b"this is not a pdf")
