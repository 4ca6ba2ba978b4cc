"""Pure HbA1c helpers: value extraction from text and trend narratives."""
from glycotrack.hba1c.extractor import extract_hba1c_value, find_hba1c_candidates
from glycotrack.hba1c.trend import build_trend_summary, format_percentage

__all__ = [
    "build_trend_summary",
    "extract_hba1c_value",
    "find_hba1c_candidates",
    "format_percentage",
]
