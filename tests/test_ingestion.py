import importlib.util
import io
import logging
from pathlib import Path

import pytest

from jobs.errors import DuplicateReferenceError, EmptyOrInvalidUploadError
from jobs.ingestion import IngestionPipeline, decode_upload, normalize_headers, read_upload
from jobs.models import JobRecord, JobStatus
from jobs.validation import parse_instant


def office_row(reference, driver="Tendai Moyo", collection_time="2024-03-01 08:00", **extra):
    """A row as the dispatch office spreadsheet exports it."""
    row = {
        "Reference Number": reference,
        "Customer": "Harare Hardware",
        "Driver": driver,
        "Collection Address": "Samora Machel Ave, Harare",
        "Delivery Address": "Seke Rd, Chitungwiza",
        "Collection Time": collection_time,
    }
    row.update(extra)
    return row


def stored_job(reference):
    return JobRecord(
        reference_number=reference,
        customer_name="Existing Customer",
        driver_name="Farai Ncube",
        collection_address="Borrowdale Rd, Harare",
        delivery_address="Enterprise Rd, Harare",
        collection_time=parse_instant("2024-02-01T10:00:00Z"),
    )


@pytest.fixture
def pipeline(store):
    return IngestionPipeline(store)


def test_headers_are_matched_case_insensitively_and_unknown_ones_dropped():
    row = {"  REFERENCE NUMBER ": "JOB-1", "customer": "Acme", "Vehicle": "Truck 7", "Notes": "fragile"}
    assert normalize_headers(row) == {"reference_number": "JOB-1", "customer_name": "Acme", "notes": "fragile"}


def test_row_missing_driver_is_skipped(pipeline, store, caplog):
    rows = [office_row("JOB-1"), office_row("JOB-2", driver="   "), office_row("JOB-3")]

    with caplog.at_level(logging.WARNING, logger="jobs.ingestion"):
        result = pipeline.ingest(rows)

    assert result.inserted_count == 2
    assert result.skipped_count == 1
    assert sorted(job.reference_number for job in store.find_all()) == ["JOB-1", "JOB-3"]
    assert "JOB-2" in caplog.text


def test_row_with_unparsable_time_is_skipped(pipeline, store):
    result = pipeline.ingest([office_row("JOB-1"), office_row("JOB-2", collection_time="next tuesday-ish")])

    assert result.inserted_count == 1
    assert [job.reference_number for job in store.find_all()] == ["JOB-1"]


def test_admitted_rows_are_scheduled_and_trimmed(pipeline, store):
    pipeline.ingest([office_row("  JOB-1  ", Status="Completed", Notes="Call on arrival")])

    job = store.find_all()[0]
    assert job.reference_number == "JOB-1"
    assert job.status is JobStatus.SCHEDULED
    assert job.notes == "Call on arrival"
    assert job.collection_time == parse_instant("2024-03-01T08:00:00Z")


def test_duplicate_inside_batch_inserts_nothing(pipeline, store):
    with pytest.raises(DuplicateReferenceError):
        pipeline.ingest([office_row("JOB-1"), office_row("JOB-2"), office_row("JOB-1")])

    assert store.find_all() == []


def test_collision_with_stored_job_inserts_nothing(pipeline, store):
    store.insert(stored_job("JOB-2"))

    with pytest.raises(DuplicateReferenceError) as excinfo:
        pipeline.ingest([office_row("JOB-1"), office_row("JOB-2")])

    assert "JOB-2" in str(excinfo.value)
    assert [job.reference_number for job in store.find_all()] == ["JOB-2"]


def test_replace_existing_clears_the_board_first(pipeline, store):
    store.insert(stored_job("OLD-1"))
    store.insert(stored_job("OLD-2"))

    result = pipeline.ingest([office_row("JOB-1"), office_row("OLD-1")], replace_existing=True)

    assert result.inserted_count == 2
    assert sorted(job.reference_number for job in store.find_all()) == ["JOB-1", "OLD-1"]


def test_invalid_upload_with_replace_keeps_existing_jobs(pipeline, store):
    store.insert(stored_job("OLD-1"))

    with pytest.raises(EmptyOrInvalidUploadError):
        pipeline.ingest([office_row("JOB-1", driver=""), {"Unrelated": "x"}], replace_existing=True)

    assert [job.reference_number for job in store.find_all()] == ["OLD-1"]


def test_empty_upload_is_its_own_failure(pipeline):
    with pytest.raises(EmptyOrInvalidUploadError) as excinfo:
        pipeline.ingest([])
    assert excinfo.value.kind == "EmptyOrInvalidUpload"


def test_read_upload_keeps_cells_as_text():
    csv_text = (
        "Reference Number,Customer,Driver,Collection Address,Delivery Address,Collection Time\n"
        "00123,Harare Hardware,,\"Samora Machel Ave, Harare\",Seke Rd,2024-03-01 08:00\n"
    )
    rows = read_upload(io.StringIO(csv_text))

    assert rows == [{
        "Reference Number": "00123",
        "Customer": "Harare Hardware",
        "Driver": "",
        "Collection Address": "Samora Machel Ave, Harare",
        "Delivery Address": "Seke Rd",
        "Collection Time": "2024-03-01 08:00",
    }]


def test_read_upload_of_empty_file_gives_no_rows():
    assert read_upload(io.StringIO("")) == []


def load_mock_generator():
    """scripts/ is a folder of runnable scripts, not a package."""
    path = Path(__file__).resolve().parent.parent / "scripts" / "generate_mock_jobs.py"
    module_spec = importlib.util.spec_from_file_location("generate_mock_jobs", path)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


def test_read_upload_skips_lines_with_extra_cells(caplog):
    """
    An unquoted comma in an address gives the line one cell too many. The line
    is dropped and logged, the rest of the file still reads.
    """
    csv_text = (
        "Reference Number,Customer,Driver,Collection Address,Delivery Address,Collection Time\n"
        "J1,Harare Hardware,Tendai Moyo,Samora Machel Ave,Seke Rd,2024-03-01 08:00\n"
        "J2,Harare Hardware,Tendai Moyo,Samora Machel Ave, Harare,Seke Rd,2024-03-01 09:00\n"
    )
    with caplog.at_level(logging.WARNING, logger="jobs.ingestion"):
        rows = read_upload(io.StringIO(csv_text))

    assert [row["Reference Number"] for row in rows] == ["J1"]
    assert "malformed CSV line" in caplog.text


def test_decode_upload_strips_bom():
    assert decode_upload("\ufeffReference Number\nJ1\n".encode("utf-8")) == "Reference Number\nJ1\n"


def test_decode_upload_rejects_non_utf8_bytes():
    with pytest.raises(EmptyOrInvalidUploadError) as excinfo:
        decode_upload(b"Reference Number,Customer\n\xff\xfe,\x80\n")
    assert excinfo.value.kind == "EmptyOrInvalidUpload"


def test_generated_mock_upload_round_trip(tmp_path, pipeline, store):
    generate_mock_jobs = load_mock_generator().generate_mock_jobs

    output = tmp_path / "jobs_upload.csv"
    generate_mock_jobs(num_jobs=20, output_file=str(output), seed=7)

    result = pipeline.ingest(read_upload(str(output)))

    assert result.inserted_count == 20
    assert len(store.find_all()) == 20
