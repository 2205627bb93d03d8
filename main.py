import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Tuple, Union

from models.errors import MalformedTimestampError
from models.schema import AccrualState, EmployeePunches, JobRate, PayrollOutcome, PayrollResult, PunchError
from utils.helper import (
    DEFAULT_INPUT_FILE,
    DEFAULT_OUTPUT_FILE,
    build_job_rate_index,
    format_decimal,
    hours_between,
    load_payroll_file,
    parse_timestamp,
    write_results_file,
)

REGULAR_HOURS_LIMIT = Decimal(40)
OVERTIME_HOURS_LIMIT = Decimal(48)
OVERTIME_MULTIPLIER = Decimal("1.5")
DOUBLETIME_MULTIPLIER = Decimal(2)

JobRates = Union[Mapping[str, JobRate], Iterable[JobRate]]

def sort_punches(employee: EmployeePunches) -> List[Tuple[str, datetime, datetime]]:
    """Parse every punch and order them by start time.

    Punches with unknown jobs are parsed too, so a bad timestamp is reported
    wherever it appears. Ties keep their input order.
    """
    parsed = []
    for index, punch in enumerate(employee.time_punch):
        times = []
        for field in ("start", "end"):
            value = getattr(punch, field)
            try:
                times.append(parse_timestamp(value))
            except ValueError as exc:
                raise MalformedTimestampError(employee.employee, index, field, value) from exc
        parsed.append((punch.job, times[0], times[1]))
    return sorted(parsed, key=lambda p: p[1])


def accrue_punch(state: AccrualState, hours: Decimal, job: JobRate) -> AccrualState:
    """Fold one punch into the running totals.

    The punch is billed from the current cumulative position: regular up to
    40h, overtime up to 48h, double time beyond. A single punch may span
    several bands. Benefits ignore the bands.
    """
    hours_worked = state.hours_worked
    wages = state.wages
    remaining = hours

    regular = min(remaining, max(Decimal(0), REGULAR_HOURS_LIMIT - hours_worked))
    if regular > 0:
        wages += regular * job.rate
        remaining -= regular
        hours_worked += regular

    if remaining > 0:
        overtime = min(remaining, max(Decimal(0), OVERTIME_HOURS_LIMIT - hours_worked))
        if overtime > 0:
            wages += overtime * job.rate * OVERTIME_MULTIPLIER
            remaining -= overtime
            hours_worked += overtime

        if remaining > 0:
            wages += remaining * job.rate * DOUBLETIME_MULTIPLIER
            hours_worked += remaining

    return AccrualState(
        hours_worked=hours_worked,
        wages=wages,
        benefits=state.benefits + hours * job.benefits_rate,
    )


def report_hours(hours_worked: Decimal) -> Tuple[Decimal, Decimal, Decimal]:
    regular = min(hours_worked, REGULAR_HOURS_LIMIT)
    overtime = max(Decimal(0), min(hours_worked - REGULAR_HOURS_LIMIT, OVERTIME_HOURS_LIMIT - REGULAR_HOURS_LIMIT))
    doubletime = max(Decimal(0), hours_worked - OVERTIME_HOURS_LIMIT)
    return regular, overtime, doubletime


def calculate_employee_payroll(employee: EmployeePunches, job_index: Mapping[str, JobRate]) -> PayrollResult:
    state = AccrualState()
    for job_name, start, end in sort_punches(employee):
        job = job_index.get(job_name)
        if job is None:
            logging.debug(f"Skipping punch for unknown job {job_name!r} (employee {employee.employee!r})")
            continue
        state = accrue_punch(state, hours_between(start, end), job)

    regular, overtime, doubletime = report_hours(state.hours_worked)
    return PayrollResult(
        employee=employee.employee,
        regular=format_decimal(regular),
        overtime=format_decimal(overtime),
        doubletime=format_decimal(doubletime),
        wage_total=format_decimal(state.wages),
        benefit_total=format_decimal(state.benefits),
    )


def _job_index(job_rates: JobRates) -> Mapping[str, JobRate]:
    if isinstance(job_rates, Mapping):
        return job_rates
    return build_job_rate_index(job_rates)


def calculate_payroll(job_rates: JobRates, employees: Iterable[EmployeePunches]) -> Dict[str, PayrollResult]:
    """Compute every employee's totals. A malformed timestamp aborts the whole run."""
    job_index = _job_index(job_rates)
    results = {}
    for employee in employees:
        try:
            results[employee.employee] = calculate_employee_payroll(employee, job_index)
        except MalformedTimestampError as exc:
            logging.error(f"Payroll run aborted: {exc.message}")
            raise
    logging.info(f"Payroll calculated for {len(results)} employees")
    return results


def calculate_payroll_outcome(job_rates: JobRates, employees: Iterable[EmployeePunches]) -> PayrollOutcome:
    """Compute every employee's totals, isolating employees with malformed punches."""
    job_index = _job_index(job_rates)
    outcome = PayrollOutcome()
    for employee in employees:
        try:
            outcome.results[employee.employee] = calculate_employee_payroll(employee, job_index)
        except MalformedTimestampError as exc:
            logging.warning(f"Skipping employee {exc.employee!r}: {exc.message}")
            outcome.errors.append(PunchError(
                employee=exc.employee,
                punch_index=exc.punch_index,
                field=exc.field,
                value=exc.value,
                message=exc.message,
            ))
    logging.info(f"Payroll calculated for {len(outcome.results)} employees, {len(outcome.errors)} failed")
    return outcome


def run_payroll_file(input_path=DEFAULT_INPUT_FILE, output_path=DEFAULT_OUTPUT_FILE) -> Dict[str, PayrollResult]:
    data = load_payroll_file(input_path)
    results = calculate_payroll(data.job_meta, data.employee_data)
    write_results_file(results, output_path)
    return results
