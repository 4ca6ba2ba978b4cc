"""
HbA1c value extraction from free-form report text.
"""
import math
import re
from typing import Any, List, Optional

from glycotrack.config.constants import HBA1C_MAX_PERCENT, HBA1C_MIN_PERCENT

HBA1C_PATTERN = re.compile(
    r"(?:hba1c|hb\s*a1c|a1c)\s*(?:level|value|reading)?\s*[:=]?\s*(\d{1,2}(?:\.\d{1,2})?)",
    re.IGNORECASE | re.ASCII,
)


def is_plausible_hba1c(value: float) -> bool:
    return math.isfinite(value) and HBA1C_MIN_PERCENT < value < HBA1C_MAX_PERCENT


def find_hba1c_candidates(text: Any) -> List[float]:
    """
    Return every plausible HbA1c percentage in ``text``, in order of appearance.

    Numbers that fail to parse or fall outside (0, 25) are skipped.
    """
    if not isinstance(text, str) or not text:
        return []

    candidates = []
    for match in HBA1C_PATTERN.finditer(text):
        try:
            value = float(match.group(1))
        except ValueError:
            continue
        if is_plausible_hba1c(value):
            candidates.append(value)
    return candidates


def extract_hba1c_value(text: Any) -> Optional[float]:
    """
    Pull the first plausible HbA1c percentage out of report text.

    Later mentions (e.g. restated in a footer) are ignored. Returns None when
    nothing is detected so callers can skip storing a reading.
    """
    candidates = find_hba1c_candidates(text)
    return candidates[0] if candidates else None
