"""
Payroll Module (``nomina_modules.payroll``).

Responsibility
--------------
Colombian monthly payroll: the employee roster, payroll novelties
(absences, vacations, overtime, bonuses, payroll deductions), salary
advances, the monthly run, and the plain-text payroll report.

Architecture position
---------------------
**Modules layer** -- record types, boundary parsing, in-memory ledgers, and
a service facade (``nomina_modules.payroll.service``) that delegates all
computation to ``nomina_engines``.

The service and report are imported from their own modules; the engines
depend on the record types exported here.

Failure modes
-------------
* Boundary parsing raises ``UnknownNoveltyTypeError`` /
  ``UnknownContractTypeError`` for codes outside the closed catalogs.
* Ledgers raise ``DuplicateRecordError`` and the ``*NotFoundError`` family.
"""

from nomina_modules.payroll.ledgers import (
    AdvanceLedger,
    EmployeeRoster,
    NoveltyLedger,
    RateSettings,
)
from nomina_modules.payroll.models import (
    NOVELTY_CATALOG,
    AdvancePayment,
    ContractType,
    DaysQuantity,
    Employee,
    HoursQuantity,
    MoneyQuantity,
    Novelty,
    NoveltyPolarity,
    NoveltyType,
    NoveltyUnit,
    Recurrence,
)

__all__ = [
    "AdvanceLedger",
    "AdvancePayment",
    "ContractType",
    "DaysQuantity",
    "Employee",
    "EmployeeRoster",
    "HoursQuantity",
    "MoneyQuantity",
    "NOVELTY_CATALOG",
    "Novelty",
    "NoveltyLedger",
    "NoveltyPolarity",
    "NoveltyType",
    "NoveltyUnit",
    "RateSettings",
    "Recurrence",
]
