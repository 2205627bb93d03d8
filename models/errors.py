class PayrollError(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MalformedTimestampError(PayrollError):
    """A punch's start or end time does not match the timestamp format."""

    def __init__(self, employee: str, punch_index: int, field: str, value: str) -> None:
        self.employee = employee
        self.punch_index = punch_index
        self.field = field
        self.value = value
        super().__init__(
            f"Malformed {field} timestamp {value!r} in punch {punch_index} for employee {employee!r}"
        )


class MissingRequiredInputError(PayrollError):
    """The payload lacks the job rate table or the employee table."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Invalid payroll data - missing required field: {field}")
