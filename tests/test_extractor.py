import pytest

from glycotrack.hba1c.extractor import extract_hba1c_value, find_hba1c_candidates


@pytest.mark.parametrize(
    "text",
    [
        "",
        "Fasting glucose 110 mg/dL, cholesterol 180",
        "Haemoglobin 13.5 g/dL",
        "HbA1c pending",
    ],
)
def test_no_hba1c_mention_returns_none(text):
    assert extract_hba1c_value(text) is None


@pytest.mark.parametrize("text", [None, 7.2, b"HbA1c: 7.2", ["HbA1c: 7.2"]])
def test_non_text_input_returns_none(text):
    assert extract_hba1c_value(text) is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("HbA1c: 7.2", 7.2),
        ("hba1c 6", 6.0),
        ("HB A1C level = 6.8 %", 6.8),
        ("Hb  a1c reading: 5.75", 5.75),
        ("A1C value 9.1", 9.1),
        ("Glycated haemoglobin HbA1c=8.45%", 8.45),
    ],
)
def test_detects_value(text, expected):
    assert extract_hba1c_value(text) == expected


def test_out_of_range_value_is_rejected():
    assert extract_hba1c_value("HbA1c 54") is None


def test_zero_is_rejected():
    assert extract_hba1c_value("HbA1c: 0.0") is None


def test_first_valid_match_wins():
    assert extract_hba1c_value("A1c 6.5 measured in March ... A1c 8.0 in June") == 6.5


def test_invalid_candidates_are_skipped_before_first_valid():
    text = "HbA1c value: 30 (units mmol/mol)\nHbA1c: 7.1 %"
    assert extract_hba1c_value(text) == 7.1
    assert find_hba1c_candidates(text) == [7.1]


def test_candidates_keep_text_order():
    text = "HbA1c 8.0\nSummary: a1c = 6.2, previous HbA1c 7.4"
    assert find_hba1c_candidates(text) == [8.0, 6.2, 7.4]


def test_non_ascii_digits_are_not_read_as_a_value():
    assert extract_hba1c_value("HbA1c: ٧.٢") is None
    assert extract_hba1c_value("HbA1c: ٧.٢ then HbA1c: 6.9") == 6.9
