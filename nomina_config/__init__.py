"""
nomina_config: single public entrypoint for payroll rate configuration.

Responsibility:
    Provides the runtime way to obtain ``DeductionRates`` through
    ``get_active_rates()``.  Rate sets live as YAML files under
    ``nomina_config/sets`` (one per year, ``co_<year>.yaml``).

Invariants enforced:
    - Rates are passed explicitly into the engine; nothing here is cached
      or held as global mutable state.
    - Deterministic loading: the same YAML always yields the same rates
      and checksum.

Failure modes:
    - ``FileNotFoundError`` -- no rate set for the requested year.
    - ``InvalidRateError`` -- a rate is outside its allowed range.
    - ``ConfigError`` -- the file's ``scope.year`` names another year.

Audit relevance:
    Every successful ``get_active_rates()`` call emits a
    ``NOMINA_CONFIG_TRACE`` log entry carrying the source file, year, and
    checksum, tying each payroll run to the rate set that governed it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from nomina_config.loader import (
    compute_checksum,
    load_rates_file,
    parse_rates,
    parse_scope,
    read_rate_document,
)
from nomina_config.schema import (
    DEFAULT_DEDUCTION_RATES,
    MINIMUM_SALARY_COLOMBIA,
    TRANSPORT_ALLOWANCE,
    DeductionRates,
)
from nomina_kernel.exceptions import ConfigError

_logger = logging.getLogger("nomina_kernel.config")

_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"
DEFAULT_YEAR = 2024


def get_active_rates(
    year: int = DEFAULT_YEAR,
    config_dir: Path | None = None,
) -> DeductionRates:
    """Load the rate set for ``year``.

    Args:
        year: Rate year; selects ``co_<year>.yaml``.
        config_dir: Override path to the rate sets directory.

    Raises:
        FileNotFoundError: If no rate set exists for the year.
        InvalidRateError: If the rate set fails validation.
        ConfigError: If the file is scoped to a different year.
    """
    sets_dir = config_dir or _DEFAULT_CONFIG_DIR
    path = sets_dir / f"co_{year}.yaml"
    if not path.exists():
        raise FileNotFoundError(f"No rate set for {year} in {sets_dir}")

    document = read_rate_document(path)
    scope = parse_scope(document)
    if scope.year is not None and scope.year != year:
        raise ConfigError(f"{path.name} declares year {scope.year}, expected {year}")
    rates = parse_rates(document)
    checksum = compute_checksum(document)

    _logger.info(
        "NOMINA_CONFIG_TRACE",
        extra={
            "trace_type": "NOMINA_CONFIG_TRACE",
            "source": path.name,
            "year": year,
            "checksum": checksum,
        },
    )
    return rates


__all__ = [
    "DEFAULT_DEDUCTION_RATES",
    "DEFAULT_YEAR",
    "DeductionRates",
    "MINIMUM_SALARY_COLOMBIA",
    "TRANSPORT_ALLOWANCE",
    "get_active_rates",
    "load_rates_file",
]
