"""
nomina_engines.tracer -- NOMINA_ENGINE_TRACE records for engine calls.

Responsibility:
    ``@traced_engine`` wraps a pure engine entry point and, after each call,
    logs one NOMINA_ENGINE_TRACE record naming the engine, its version, a
    fingerprint of the selected keyword inputs and the elapsed time.  Two
    runs over the same roster, ledgers, rates and month share a fingerprint,
    so a reprocessed month can be matched to the run it repeats.

Architecture position:
    Engines -- support for the pure calculation layer.  Emits a log record
    and nothing else; the wrapped function's result is returned untouched.

Invariants enforced:
    - The fingerprint depends only on the named keyword arguments.
    - Canonical form: mappings by sorted key, sequences in order,
      dataclass records field by field, enums by wire value, everything
      else by ``str``.  SHA-256, first 16 hex chars.

Failure modes:
    - A named field absent from the call is fingerprinted as "null".
    - If the engine raises, no trace is logged and the exception propagates.

Usage:
    from nomina_engines.tracer import traced_engine

    @traced_engine("payroll", "1.0", fingerprint_fields=("target_month",))
    def calculate(self, *, employees, novelties, advances, rates, target_month):
        ...
"""

from __future__ import annotations

import functools
import hashlib
import time
from collections.abc import Callable, Mapping
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any

from nomina_kernel.logging_config import get_logger

logger = get_logger("engines.tracer")

TRACE_TYPE = "NOMINA_ENGINE_TRACE"
FINGERPRINT_LENGTH = 16


def _canonicalize(value: Any) -> str:
    """Stable text form of an engine input."""
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        pairs = sorted((str(k), _canonicalize(v)) for k, v in value.items())
        return "{" + ",".join(f"{k}:{v}" for k, v in pairs) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize(item) for item in value) + "]"
    if is_dataclass(value) and not isinstance(value, type):
        if type(value).__str__ is not object.__str__:
            # value objects with their own text form (PayrollMonth)
            return str(value)
        body = ",".join(
            f"{f.name}={_canonicalize(getattr(value, f.name))}" for f in fields(value)
        )
        return f"{type(value).__name__}({body})"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    kwargs: dict[str, Any],
) -> str:
    """SHA-256 prefix over ``name=value`` pairs of the selected fields."""
    canonical = "|".join(
        f"{name}={_canonicalize(kwargs.get(name))}" for name in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """
    Decorate an engine entry point so each call logs NOMINA_ENGINE_TRACE.

    Args:
        engine_name: Engine identifier, e.g. "payroll".
        engine_version: Version of the calculation rules, e.g. "1.0".
        fingerprint_fields: Keyword arguments hashed into
            ``input_fingerprint``.  Empty means no fingerprint.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = (
                compute_input_fingerprint(fingerprint_fields, kwargs)
                if fingerprint_fields
                else ""
            )
            started = time.perf_counter()
            result = func(*args, **kwargs)
            logger.info(TRACE_TYPE, extra={
                "trace_type": TRACE_TYPE,
                "engine_name": engine_name,
                "engine_version": engine_version,
                "input_fingerprint": fingerprint,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                "function": func.__qualname__,
            })
            return result

        return wrapper

    return decorator
