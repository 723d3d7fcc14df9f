"""Unit tests for the SQL clause builders."""

from __future__ import annotations

from decimal import Decimal

import pytest

from app.core.errors import (
    EmptyInputError,
    InvalidBooleanError,
    InvalidRangeError,
    NotANumberError,
    ValidationError,
)
from app.persistence.query_builder import (
    ClauseResult,
    FilterRule,
    build_company_filter,
    build_job_filter,
    build_set_clause,
    build_where_clause,
    coerce_boolean,
    coerce_number,
)

# ---------------------------------------------------------------------------
# build_set_clause
# ---------------------------------------------------------------------------


def test_build_set_clause_renames_mapped_columns() -> None:
    result = build_set_clause({"test": 5, "test2": 6}, {"test": "test_column"})

    assert result.sql == '"test_column"=$1, "test2"=$2'
    assert result.values == [5, 6]


def test_build_set_clause_numbers_placeholders_in_input_order() -> None:
    data = {"logoUrl": "http://x", "name": "New", "numEmployees": 7}
    result = build_set_clause(data, {"numEmployees": "num_employees", "logoUrl": "logo_url"})

    assert result.sql == '"logo_url"=$1, "name"=$2, "num_employees"=$3'
    assert result.values == ["http://x", "New", 7]
    assert result.next_param == 4


def test_build_set_clause_passes_none_through() -> None:
    result = build_set_clause({"salary": None, "equity": None})

    assert result.sql == '"salary"=$1, "equity"=$2'
    assert result.values == [None, None]


def test_build_set_clause_rejects_empty_input() -> None:
    with pytest.raises(EmptyInputError):
        build_set_clause({}, {"test": "test_column"})


def test_empty_input_is_a_bad_request() -> None:
    with pytest.raises(ValidationError) as exc_info:
        build_set_clause({})
    assert exc_info.value.status_code == 400


# ---------------------------------------------------------------------------
# coercion
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("raw", [1, "1", " 1 "])
def test_coerce_number_treats_numeric_strings_like_numbers(raw) -> None:
    assert coerce_number("minEmployees", raw) == 1


def test_coerce_number_parses_decimals() -> None:
    assert coerce_number("minSalary", "1500.5") == 1500.5


@pytest.mark.parametrize(("raw", "expected"), [("-2", -2), ("+3", 3), (".5", 0.5), ("1e3", 1000.0)])
def test_coerce_number_accepts_plain_notation(raw, expected) -> None:
    assert coerce_number("minSalary", raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["nonnumber string", "", "nan", "inf", "1e400", "1_000", "\u0661\u0662", True, None, float("nan"), float("inf")],
)
def test_coerce_number_rejects_non_numbers(raw) -> None:
    with pytest.raises(NotANumberError) as exc_info:
        coerce_number("minSalary", raw)
    assert exc_info.value.field == "minSalary"
    assert exc_info.value.details["field"] == "minSalary"


@pytest.mark.parametrize(("raw", "expected"), [(True, True), ("true", True), (False, False), ("false", False)])
def test_coerce_boolean_accepts_literals(raw, expected) -> None:
    assert coerce_boolean("hasEquity", raw) is expected


@pytest.mark.parametrize("raw", ["True", "1", 1, 0, "yes", "", None])
def test_coerce_boolean_rejects_everything_else(raw) -> None:
    with pytest.raises(InvalidBooleanError):
        coerce_boolean("hasEquity", raw)


# ---------------------------------------------------------------------------
# build_where_clause
# ---------------------------------------------------------------------------


def test_build_where_clause_follows_rule_order_not_input_order() -> None:
    rules = (
        FilterRule("a", "a = {param}"),
        FilterRule("b", "b = {param}"),
    )
    result = build_where_clause({"b": "2", "a": "1"}, rules)

    assert result.sql == "a = $1 AND b = $2"
    assert result.values == ["1", "2"]


def test_build_where_clause_ignores_keys_without_rules() -> None:
    rules = (FilterRule("a", "a = {param}"),)
    result = build_where_clause({"a": "x", "other": "y"}, rules)

    assert result.sql == "a = $1"
    assert result.values == ["x"]


def test_build_where_clause_does_not_mutate_input() -> None:
    filters = {"nameLike": "c", "minEmployees": "1"}
    build_company_filter(filters)

    assert filters == {"nameLike": "c", "minEmployees": "1"}


# ---------------------------------------------------------------------------
# company filter
# ---------------------------------------------------------------------------


def test_company_filter_name_like_wraps_value() -> None:
    result = build_company_filter({"nameLike": "c"})

    assert result == ClauseResult(sql="name ILIKE $1", values=["%c%"])
    assert result.has_clauses is True


def test_company_filter_employee_range() -> None:
    result = build_company_filter({"minEmployees": 1, "maxEmployees": 2})

    assert result.sql == "num_employees >= $1::numeric AND num_employees <= $2::numeric"
    assert result.values == [1, 2]


def test_company_filter_string_numbers_coerce_like_numbers() -> None:
    assert build_company_filter({"minEmployees": "1", "maxEmployees": "2"}) == build_company_filter(
        {"minEmployees": 1, "maxEmployees": 2}
    )


def test_company_filter_all_fields() -> None:
    result = build_company_filter({"maxEmployees": "300", "nameLike": "net", "minEmployees": "10"})

    assert result.sql == "name ILIKE $1 AND num_employees >= $2::numeric AND num_employees <= $3::numeric"
    assert result.values == ["%net%", 10, 300]


def test_company_filter_equal_bounds_allowed() -> None:
    result = build_company_filter({"minEmployees": 5, "maxEmployees": "5"})
    assert result.values == [5, 5]


def test_company_filter_rejects_inverted_range() -> None:
    with pytest.raises(InvalidRangeError):
        build_company_filter({"minEmployees": 2, "maxEmployees": 1})


def test_company_filter_rejects_inverted_range_from_strings() -> None:
    # compared numerically, not lexically
    with pytest.raises(InvalidRangeError):
        build_company_filter({"minEmployees": "10", "maxEmployees": "9"})


def test_company_filter_rejects_non_number() -> None:
    with pytest.raises(NotANumberError) as exc_info:
        build_company_filter({"maxEmployees": "lots"})
    assert exc_info.value.details == {"field": "maxEmployees", "value": "lots"}


def test_company_filter_rejects_empty() -> None:
    with pytest.raises(EmptyInputError):
        build_company_filter({})


# ---------------------------------------------------------------------------
# job filter
# ---------------------------------------------------------------------------


def test_job_filter_has_equity_true() -> None:
    result = build_job_filter({"hasEquity": True})

    assert result.sql == "equity > $1"
    assert result.values == [0]


def test_job_filter_has_equity_string_true() -> None:
    assert build_job_filter({"hasEquity": "true"}) == build_job_filter({"hasEquity": True})


@pytest.mark.parametrize("raw", [False, "false"])
def test_job_filter_has_equity_false_adds_no_constraint(raw) -> None:
    result = build_job_filter({"hasEquity": raw})

    assert result.sql == ""
    assert result.values == []
    assert result.has_clauses is False


def test_job_filter_has_equity_false_keeps_numbering_of_other_filters() -> None:
    result = build_job_filter({"hasEquity": "false", "minSalary": "100", "title": "eng"})

    assert result.sql == "title ILIKE $1 AND salary >= $2::numeric"
    assert result.values == ["%eng%", 100]


def test_job_filter_all_fields() -> None:
    result = build_job_filter({"hasEquity": "true", "minSalary": 50000, "title": "dev"})

    assert result.sql == "title ILIKE $1 AND salary >= $2::numeric AND equity > $3"
    assert result.values == ["%dev%", 50000, 0]


def test_job_filter_rejects_non_number_salary() -> None:
    with pytest.raises(NotANumberError):
        build_job_filter({"minSalary": "nonnumber string"})


def test_job_filter_rejects_bad_boolean() -> None:
    with pytest.raises(InvalidBooleanError) as exc_info:
        build_job_filter({"hasEquity": "sometimes"})
    assert exc_info.value.details == {"field": "hasEquity", "value": "sometimes"}


def test_job_filter_rejects_empty() -> None:
    with pytest.raises(EmptyInputError):
        build_job_filter({})


# ---------------------------------------------------------------------------
# numeric binding
# ---------------------------------------------------------------------------


def test_numeric_filters_bind_decimals_against_numeric_cast() -> None:
    result = build_job_filter({"minSalary": "1.5"})

    assert result.sql == "salary >= $1::numeric"
    assert result.values == [Decimal("1.5")]
    assert isinstance(result.values[0], Decimal)


def test_numeric_filters_keep_values_beyond_int32() -> None:
    result = build_company_filter({"minEmployees": "3000000000"})
    assert result.values == [Decimal("3000000000")]


def test_fractional_bounds_still_compare_as_numbers() -> None:
    with pytest.raises(InvalidRangeError):
        build_company_filter({"minEmployees": "0.5", "maxEmployees": "0.25"})
