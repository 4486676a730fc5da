from datetime import datetime, timezone

import pytest

from jobs.validation import clean_job_fields, parse_instant


@pytest.mark.parametrize("value, expected", [
    ("2024-03-01T08:00:00Z", datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)),
    ("2024-03-01 10:00+02:00", datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)),
    ("2024-03-01 08:00", datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)),
    (datetime(2024, 3, 1, 8, 0), datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)),
])
def test_parse_instant_reads_text_and_datetimes_as_utc(value, expected):
    assert parse_instant(value) == expected


def test_parse_instant_reads_numbers_as_epoch_milliseconds():
    """
    Browsers send Date values as milliseconds since the epoch.
    """
    expected = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    assert parse_instant(1700000000000) == expected
    assert parse_instant(1700000000000.0) == expected


@pytest.mark.parametrize("value", [None, "", "   ", "not a date", True, False, [2024, 3, 1]])
def test_parse_instant_rejects_empty_and_unparsable_values(value):
    assert parse_instant(value) is None


def test_clean_job_fields_trims_and_reports_problems():
    cleaned, problems = clean_job_fields({
        "reference_number": "  JOB-1 ",
        "customer_name": "Harare Hardware",
        "driver_name": " ",
        "collection_time": 1700000000000,
    })

    assert cleaned["reference_number"] == "JOB-1"
    assert cleaned["collection_time"] == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
    assert problems == ["driver_name", "collection_address", "delivery_address"]
