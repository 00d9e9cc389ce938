"""
Nomina Modules.

Thin orchestration layers over the kernel and the engines.  Each module
contains:
- Domain records (the nouns)
- Boundary parsing (raw form records -> typed records)
- In-memory ledgers and a service facade
- Reporting

Modules:
- Payroll: Roster, novelties, advances, monthly runs, text report
"""
