from decimal import Decimal
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

class JobRate(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    job: str
    rate: Decimal
    benefits_rate: Decimal = Field(alias="benefitsRate")

class TimePunch(BaseModel):
    job: str
    start: str
    end: str

class EmployeePunches(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    employee: str
    time_punch: List[TimePunch] = Field(default_factory=list, alias="timePunch")

class PayrollData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    job_meta: List[JobRate] = Field(alias="jobMeta")
    employee_data: List[EmployeePunches] = Field(alias="employeeData")

class AccrualState(BaseModel):
    model_config = ConfigDict(frozen=True)

    hours_worked: Decimal = Decimal(0)
    wages: Decimal = Decimal(0)
    benefits: Decimal = Decimal(0)

class PayrollResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    employee: str
    regular: str
    overtime: str
    doubletime: str
    wage_total: str = Field(alias="wageTotal")
    benefit_total: str = Field(alias="benefitTotal")

class PunchError(BaseModel):
    employee: str
    punch_index: int
    field: str
    value: str
    message: str

class PayrollOutcome(BaseModel):
    results: Dict[str, PayrollResult] = Field(default_factory=dict)
    errors: List[PunchError] = Field(default_factory=list)
