"""
Rate Set Loader (``nomina_config.loader``).

Responsibility
--------------
Reads a rate set YAML file (``scope`` + ``rates`` sections, see
``sets/co_2024.yaml``) into a frozen ``DeductionRates`` plus a checksum that
identifies the exact file contents a payroll run was computed with.
Runtime callers go through ``nomina_config.get_active_rates()``; the
functions here also serve ``scripts/run_payroll.py --rates``.

Failure modes
-------------
* Missing file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Top level not a mapping  -> ``ConfigError``.
* No ``rates`` section  -> ``KeyError`` propagates.
* Out-of-range rate  -> ``InvalidRateError`` propagates.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from nomina_config.schema import DeductionRates
from nomina_kernel.exceptions import ConfigError


@dataclass(frozen=True)
class RateSetScope:
    """Where and when a rate set applies; every field optional in the file."""

    jurisdiction: str | None = None
    year: int | None = None
    currency: str | None = None


def read_rate_document(path: Path) -> dict[str, Any]:
    """Parse ``path`` with ``yaml.safe_load``; an empty file is ``{}``."""
    with open(path, encoding="utf-8") as f:
        document = yaml.safe_load(f)
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigError(f"{path.name}: expected a mapping, got {type(document).__name__}")
    return document


def parse_scope(data: dict[str, Any]) -> RateSetScope:
    scope = data.get("scope") or {}
    year = scope.get("year")
    return RateSetScope(
        jurisdiction=scope.get("jurisdiction"),
        year=int(year) if year is not None else None,
        currency=scope.get("currency"),
    )


def parse_rates(data: dict[str, Any]) -> DeductionRates:
    """``DeductionRates`` from the ``rates`` section; absent keys keep defaults."""
    return DeductionRates.from_dict(dict(data["rates"]))


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 hex digest of the document, independent of key order."""
    canonical = json.dumps(data, sort_keys=True, default=str, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def load_rates_file(path: Path) -> tuple[DeductionRates, str]:
    """Rates and checksum of one rate set file."""
    document = read_rate_document(path)
    return parse_rates(document), compute_checksum(document)
