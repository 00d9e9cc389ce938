"""
Nomina Kernel

Shared foundation for the payroll packages:
- Structured JSON logging with request-scoped context
- Typed exceptions carrying machine-readable codes
- Immutable domain values (payroll month, money rounding, clock)
"""

__version__ = "0.1.0"
