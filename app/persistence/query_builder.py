"""Helpers for building parameterized SQL fragments from sparse request data.

Both builders return a :class:`ClauseResult` whose ``sql`` uses positional
``$N`` placeholders (asyncpg style) numbered from 1 in the order values were
appended. Neither builder emits the ``SET``/``WHERE`` keyword; callers decide
from ``has_clauses``.

Column names and templates must be static/trusted (owned by application
code), never request input.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from app.core.errors import (
    EmptyInputError,
    InvalidBooleanError,
    InvalidRangeError,
    NotANumberError,
)


@dataclass(frozen=True)
class ClauseResult:
    sql: str
    values: list[Any] = field(default_factory=list)

    @property
    def has_clauses(self) -> bool:
        return bool(self.sql)

    @property
    def next_param(self) -> int:
        """Index of the next free positional placeholder."""
        return len(self.values) + 1


def build_set_clause(
    update_spec: Mapping[str, Any],
    rename_map: Mapping[str, str] | None = None,
) -> ClauseResult:
    """Build a ``"column"=$N, ...`` fragment for a partial update.

    Fields are emitted in the mapping's iteration order and their values are
    passed through untouched, so ``None`` nulls out a column.

    >>> build_set_clause({"test": 5, "test2": 6}, {"test": "test_column"})
    ClauseResult(sql='"test_column"=$1, "test2"=$2', values=[5, 6])
    """
    if not update_spec:
        raise EmptyInputError("No data")

    renames = rename_map or {}
    columns = [
        f'"{renames.get(name, name)}"=${idx}' for idx, name in enumerate(update_spec, start=1)
    ]
    return ClauseResult(sql=", ".join(columns), values=list(update_spec.values()))


# ---------------------------------------------------------------------------
# Filter coercion
# ---------------------------------------------------------------------------

INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+", re.ASCII)
DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?", re.ASCII)


def coerce_text(key: str, raw: Any) -> str:
    return str(raw)


def coerce_number(key: str, raw: Any) -> int | float:
    """Parse a numeric filter value; query strings deliver numbers as text.

    Strings must be plain ASCII decimal notation, optionally with an exponent.
    """
    if isinstance(raw, bool):
        raise NotANumberError(key, raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if not math.isfinite(raw):
            raise NotANumberError(key, raw)
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if INTEGER_PATTERN.fullmatch(text):
            return int(text)
        if not DECIMAL_PATTERN.fullmatch(text):
            raise NotANumberError(key, raw)
        number = float(text)
        if not math.isfinite(number):
            raise NotANumberError(key, raw)
        return number
    raise NotANumberError(key, raw)


def to_decimal(value: int | float) -> Decimal:
    """Bind numbers as NUMERIC so fractions and large values compare exactly."""
    return Decimal(str(value))


def coerce_boolean(key: str, raw: Any) -> bool:
    """Accept only real booleans or the exact strings ``"true"``/``"false"``."""
    if isinstance(raw, bool):
        return raw
    if raw == "true":
        return True
    if raw == "false":
        return False
    raise InvalidBooleanError(key, raw)


def contains_pattern(value: str) -> str:
    """Wrap a value for an ``ILIKE`` substring match."""
    return f"%{value}%"


def _always(value: Any) -> bool:
    return True


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True)
class FilterRule:
    """One recognized filter key and how it becomes SQL.

    ``template`` holds a ``{param}`` slot for the positional placeholder.
    ``emit`` decides from the coerced value whether the filter constrains
    anything at all, and ``bind`` turns the coerced value into the bound
    parameter.
    """

    key: str
    template: str
    coerce: Callable[[str, Any], Any] = coerce_text
    emit: Callable[[Any], bool] = _always
    bind: Callable[[Any], Any] = _identity


def build_where_clause(
    filter_spec: Mapping[str, Any],
    field_rules: Sequence[FilterRule],
    *,
    ranges: Sequence[tuple[str, str]] = (),
) -> ClauseResult:
    """Build an ``... AND ...`` predicate from optional filter values.

    Keys are processed in ``field_rules`` order, not the caller's order, so
    placeholder numbering is stable regardless of how the query string was
    parsed. Keys without a rule are ignored here; request schemas reject them.
    """
    if not filter_spec:
        raise EmptyInputError("No filters")

    coerced: dict[str, Any] = {}
    for rule in field_rules:
        if rule.key in filter_spec:
            coerced[rule.key] = rule.coerce(rule.key, filter_spec[rule.key])

    for min_key, max_key in ranges:
        if min_key in coerced and max_key in coerced and coerced[min_key] > coerced[max_key]:
            raise InvalidRangeError(min_key, max_key, coerced[min_key], coerced[max_key])

    conditions: list[str] = []
    values: list[Any] = []
    for rule in field_rules:
        if rule.key not in coerced or not rule.emit(coerced[rule.key]):
            continue
        values.append(rule.bind(coerced[rule.key]))
        conditions.append(rule.template.format(param=f"${len(values)}"))

    return ClauseResult(sql=" AND ".join(conditions), values=values)


# ---------------------------------------------------------------------------
# Resource filters
# ---------------------------------------------------------------------------

COMPANY_FILTER_RULES: tuple[FilterRule, ...] = (
    FilterRule("nameLike", "name ILIKE {param}", bind=contains_pattern),
    FilterRule("minEmployees", "num_employees >= {param}::numeric", coerce=coerce_number, bind=to_decimal),
    FilterRule("maxEmployees", "num_employees <= {param}::numeric", coerce=coerce_number, bind=to_decimal),
)
COMPANY_FILTER_RANGES: tuple[tuple[str, str], ...] = (("minEmployees", "maxEmployees"),)

# hasEquity=false means "no constraint", not "equity = 0".
JOB_FILTER_RULES: tuple[FilterRule, ...] = (
    FilterRule("title", "title ILIKE {param}", bind=contains_pattern),
    FilterRule("minSalary", "salary >= {param}::numeric", coerce=coerce_number, bind=to_decimal),
    FilterRule(
        "hasEquity",
        "equity > {param}",
        coerce=coerce_boolean,
        emit=lambda has_equity: has_equity is True,
        bind=lambda _: Decimal(0),
    ),
)


def build_company_filter(filters: Mapping[str, Any]) -> ClauseResult:
    return build_where_clause(filters, COMPANY_FILTER_RULES, ranges=COMPANY_FILTER_RANGES)


def build_job_filter(filters: Mapping[str, Any]) -> ClauseResult:
    return build_where_clause(filters, JOB_FILTER_RULES)
