import json
import logging
import re
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from pathlib import Path
from typing import Dict, Iterable

from models.errors import MissingRequiredInputError
from models.schema import JobRate, PayrollData, PayrollResult

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
TIMESTAMP_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}")
DECIMAL_PLACES = 4
DEFAULT_INPUT_FILE = "clean_data.json"
DEFAULT_OUTPUT_FILE = "payroll_results.json"

_QUANTUM = Decimal(1).scaleb(-DECIMAL_PLACES)
_SECONDS_PER_HOUR = Decimal(3600)

def parse_timestamp(text: str) -> datetime:
    # strptime alone accepts single-digit fields and runs of spaces
    if not TIMESTAMP_PATTERN.fullmatch(text):
        raise ValueError(f"timestamp {text!r} does not match format {TIMESTAMP_FORMAT!r}")
    return datetime.strptime(text, TIMESTAMP_FORMAT)

def hours_between(start: datetime, end: datetime) -> Decimal:
    seconds = int((end - start).total_seconds())
    return Decimal(seconds) / _SECONDS_PER_HOUR

def format_decimal(value: Decimal) -> str:
    return str(Decimal(value).quantize(_QUANTUM, rounding=ROUND_HALF_UP))

def build_job_rate_index(job_rates: Iterable[JobRate]) -> Dict[str, JobRate]:
    """Key the rate table by job name. The first entry for a name wins."""
    index: Dict[str, JobRate] = {}
    for job_rate in job_rates:
        if job_rate.job in index:
            logging.warning(f"Duplicate rate entry for job {job_rate.job!r} ignored")
            continue
        index[job_rate.job] = job_rate
    return index

def parse_payroll_data(payload: dict) -> PayrollData:
    for key in ("jobMeta", "employeeData"):
        if payload.get(key) is None:
            raise MissingRequiredInputError(key)
    return PayrollData.model_validate(payload)

def load_payroll_file(path) -> PayrollData:
    with open(path, encoding="utf-8") as fh:
        payload = json.load(fh)
    return parse_payroll_data(payload)

def results_to_json(results: Dict[str, PayrollResult]) -> dict:
    return {name: result.model_dump(by_alias=True) for name, result in results.items()}

def write_results_file(results: Dict[str, PayrollResult], path) -> None:
    Path(path).write_text(json.dumps(results_to_json(results), indent=2), encoding="utf-8")
    logging.info(f"Results saved to {path}")
