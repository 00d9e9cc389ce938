"""
Typed Exception Hierarchy for the payroll packages.

Every error carries a class-level ``code`` (machine-readable, stable across
message rewording) and stores its context as attributes, so callers catch by
type and read structured data instead of parsing messages:

    try:
        month = PayrollMonth.parse(raw)
    except InvalidMonthError as e:
        form_errors["month"] = e.code

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    NominaKernelError (base)
    |
    +-- MonthError
    |   +-- InvalidMonthError
    |
    +-- RosterError
    |   +-- EmployeeNotFoundError
    |   +-- UnknownContractTypeError
    |
    +-- NoveltyError
    |   +-- UnknownNoveltyTypeError
    |   +-- NoveltyUnitMismatchError
    |   +-- NoveltyNotFoundError
    |
    +-- AdvanceError
    |   +-- AdvanceNotFoundError
    |
    +-- DuplicateRecordError
    |
    +-- NoPayrollRunError
    |
    +-- ConfigError
        +-- InvalidRateError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category   | Code                     | When Raised
-----------|--------------------------|------------------------------------------
Month      | INVALID_MONTH            | Month selector is not ``YYYY-MM``
-----------|--------------------------|------------------------------------------
Roster     | EMPLOYEE_NOT_FOUND       | Employee ID not in the roster
           | UNKNOWN_CONTRACT_TYPE    | Contract is neither OPS nor NOMINA
-----------|--------------------------|------------------------------------------
Novelty    | UNKNOWN_NOVELTY_TYPE     | Type code outside the closed catalog
           | NOVELTY_UNIT_MISMATCH    | Quantity variant disagrees with the unit
           | NOVELTY_NOT_FOUND        | Novelty ID not in the ledger
-----------|--------------------------|------------------------------------------
Advance    | ADVANCE_NOT_FOUND        | Advance ID not in the ledger
-----------|--------------------------|------------------------------------------
Ledger     | DUPLICATE_RECORD         | Record ID already stored
-----------|--------------------------|------------------------------------------
Run        | NO_PAYROLL_RUN           | Report requested before any payroll run
-----------|--------------------------|------------------------------------------
Config     | INVALID_RATE             | Percentage outside [0, 100] or negative amount

The calculation engine raises none of these for well-typed input; they belong
to the boundary (parsing, ledgers, configuration).
"""


class NominaKernelError(Exception):
    """
    Base exception for all payroll errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "NOMINA_KERNEL_ERROR"


# Month-related exceptions


class MonthError(NominaKernelError):
    """Base exception for payroll month errors."""

    code: str = "MONTH_ERROR"


class InvalidMonthError(MonthError):
    """Month selector could not be parsed."""

    code: str = "INVALID_MONTH"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid payroll month (expected YYYY-MM): {value!r}")


# Roster-related exceptions


class RosterError(NominaKernelError):
    """Base exception for employee roster errors."""

    code: str = "ROSTER_ERROR"


class EmployeeNotFoundError(RosterError):
    """Employee with given ID is not in the roster."""

    code: str = "EMPLOYEE_NOT_FOUND"

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(f"Employee not found: {employee_id}")


class UnknownContractTypeError(RosterError):
    """Contract classification is not one of the supported variants."""

    code: str = "UNKNOWN_CONTRACT_TYPE"

    def __init__(self, contract_type: str):
        self.contract_type = contract_type
        super().__init__(f"Unknown contract type: {contract_type!r}")


# Novelty-related exceptions


class NoveltyError(NominaKernelError):
    """Base exception for novelty errors."""

    code: str = "NOVELTY_ERROR"


class UnknownNoveltyTypeError(NoveltyError):
    """Novelty type code is not part of the catalog."""

    code: str = "UNKNOWN_NOVELTY_TYPE"

    def __init__(self, novelty_type: str):
        self.novelty_type = novelty_type
        super().__init__(f"Unknown novelty type: {novelty_type!r}")


class NoveltyUnitMismatchError(NoveltyError):
    """
    Novelty quantity does not match the unit of its type.

    An ABSENCE carries days, FIXED_OVERTIME carries hours, MULTAS carries
    money; any other combination is rejected at construction.
    """

    code: str = "NOVELTY_UNIT_MISMATCH"

    def __init__(self, novelty_type: str, expected_unit: str, received_unit: str):
        self.novelty_type = novelty_type
        self.expected_unit = expected_unit
        self.received_unit = received_unit
        super().__init__(
            f"Novelty {novelty_type} is measured in {expected_unit}, "
            f"got a {received_unit} quantity"
        )


class NoveltyNotFoundError(NoveltyError):
    """Novelty with given ID is not in the ledger."""

    code: str = "NOVELTY_NOT_FOUND"

    def __init__(self, novelty_id: str):
        self.novelty_id = novelty_id
        super().__init__(f"Novelty not found: {novelty_id}")


# Advance-related exceptions


class AdvanceError(NominaKernelError):
    """Base exception for cash advance errors."""

    code: str = "ADVANCE_ERROR"


class AdvanceNotFoundError(AdvanceError):
    """Advance with given ID is not in the ledger."""

    code: str = "ADVANCE_NOT_FOUND"

    def __init__(self, advance_id: str):
        self.advance_id = advance_id
        super().__init__(f"Advance not found: {advance_id}")


# Run exceptions


class NoPayrollRunError(NominaKernelError):
    """A report was requested but no payroll run has been stored."""

    code: str = "NO_PAYROLL_RUN"

    def __init__(self):
        super().__init__("No payroll run available; run payroll first")


# Ledger exceptions


class DuplicateRecordError(NominaKernelError):
    """A record with the same ID is already stored."""

    code: str = "DUPLICATE_RECORD"

    def __init__(self, record_type: str, record_id: str):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(f"{record_type} already exists: {record_id}")


# Configuration exceptions


class ConfigError(NominaKernelError):
    """Base exception for rate configuration errors."""

    code: str = "CONFIG_ERROR"


class InvalidRateError(ConfigError):
    """A configured rate is outside its allowed range."""

    code: str = "INVALID_RATE"

    def __init__(self, field_name: str, value: object, reason: str):
        self.field_name = field_name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid rate {field_name}={value}: {reason}")
