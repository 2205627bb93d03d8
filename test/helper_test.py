import json
import pytest
from datetime import datetime
from decimal import Decimal
from main import run_payroll_file
from models.errors import MalformedTimestampError, MissingRequiredInputError
from models.schema import JobRate
from utils.helper import build_job_rate_index, format_decimal, hours_between, load_payroll_file, parse_payroll_data, parse_timestamp, write_results_file

PAYLOAD = {
    "jobMeta": [
        {"job": "Hospital - Painter", "rate": 31.25, "benefitsRate": 1},
        {"job": "Shop - Laborer", "rate": 16.25, "benefitsRate": 1.25},
    ],
    "employeeData": [
        {
            "employee": "Mike",
            "timePunch": [
                {"job": "Hospital - Painter", "start": "2022-02-18 09:28:00", "end": "2022-02-18 15:00:00"},
                {"job": "Shop - Laborer", "start": "2022-02-17 08:00:00", "end": "2022-02-17 12:30:00"},
            ],
        }
    ],
}

def test_parse_timestamp():
    assert parse_timestamp("2024-03-05 07:08:09") == datetime(2024, 3, 5, 7, 8, 9)

@pytest.mark.parametrize("text", [
    "2024-03-05T07:08:09",
    "2024-03-05 07:08",
    "",
    "05/03/2024 07:08:09",
    "2024-1-1 9:0:0",
    "2024-01-01   09:00:00",
    "2024-01-01 9:00:00",
    "2024-01-01 09:00:00 ",
])
def test_parse_timestamp_rejects_other_formats(text):
    with pytest.raises(ValueError):
        parse_timestamp(text)

def test_hours_between_keeps_seconds():
    assert hours_between(datetime(2024, 1, 1, 9, 0, 0), datetime(2024, 1, 1, 9, 0, 36)) == Decimal("0.01")

def test_format_decimal():
    assert format_decimal(Decimal(8)) == "8.0000"
    assert format_decimal(Decimal("1.23455")) == "1.2346"
    assert format_decimal(Decimal("2") / Decimal("3")) == "0.6667"

def test_build_job_rate_index_keeps_first_entry():
    rates = [
        JobRate(job="A", rate=Decimal(1), benefitsRate=Decimal(0)),
        JobRate(job="A", rate=Decimal(2), benefitsRate=Decimal(0)),
        JobRate(job="B", rate=Decimal(3), benefitsRate=Decimal(0)),
    ]

    index = build_job_rate_index(rates)

    assert list(index) == ["A", "B"]
    assert index["A"].rate == 1

@pytest.mark.parametrize("missing", ["jobMeta", "employeeData"])
def test_parse_payroll_data_requires_tables(missing):
    payload = dict(PAYLOAD)
    del payload[missing]

    with pytest.raises(MissingRequiredInputError) as exc_info:
        parse_payroll_data(payload)

    assert exc_info.value.field == missing

def test_parse_payroll_data_rejects_null_table():
    with pytest.raises(MissingRequiredInputError):
        parse_payroll_data({"jobMeta": None, "employeeData": []})

def test_load_payroll_file(tmp_path):
    path = tmp_path / "clean_data.json"
    path.write_text(json.dumps(PAYLOAD))

    data = load_payroll_file(path)

    assert data.job_meta[1].benefits_rate == Decimal("1.25")
    assert data.employee_data[0].time_punch[0].job == "Hospital - Painter"

def test_run_payroll_file_writes_results(tmp_path):
    source = tmp_path / "clean_data.json"
    target = tmp_path / "payroll_results.json"
    source.write_text(json.dumps(PAYLOAD))

    run_payroll_file(source, target)

    # 4.5h laborer then 5h32m painter
    assert json.loads(target.read_text()) == {
        "Mike": {
            "employee": "Mike",
            "regular": "10.0333",
            "overtime": "0.0000",
            "doubletime": "0.0000",
            "wageTotal": "246.0417",
            "benefitTotal": "11.1583",
        }
    }

def test_run_payroll_file_writes_nothing_on_error(tmp_path):
    payload = json.loads(json.dumps(PAYLOAD))
    payload["employeeData"][0]["timePunch"][0]["start"] = "not a time"
    source = tmp_path / "clean_data.json"
    target = tmp_path / "payroll_results.json"
    source.write_text(json.dumps(payload))

    with pytest.raises(MalformedTimestampError):
        run_payroll_file(source, target)

    assert not target.exists()

def test_write_results_file_with_no_employees(tmp_path):
    target = tmp_path / "out.json"

    write_results_file({}, target)

    assert target.read_text() == "{}"
