"""Filter and sort expressions shared by every document store.

A filter maps top-level field names to either a literal (equality) or
an operator mapping::

    {"title": "x"}                            # title == "x"
    {"views": {"$gte": 10, "$lt": 100}}        # 10 <= views < 100
    {"tag": {"$in": ["a", "b"]}}
    {"archived": {"$exists": False}}

Fields are combined with AND. ``None`` and ``{}`` match every document.
Equality with ``None`` matches documents where the field is null or
missing. Range operators only match values of the operand's kind:
numbers against numbers, text against text, booleans against booleans.

A sort spec is a sequence of ``(field, direction)`` pairs, ``1`` for
ascending and ``-1`` for descending. Ascending order is null or missing,
then numbers, then text; ties keep insertion order.
"""

import json
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from conceptkit.store.errors import FilterError

type Filter = Mapping[str, Any]
type SortSpec = Sequence[tuple[str, int]]

_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_MISSING = object()


def _lt(a: Any, b: Any) -> bool:
    return a < b


def _lte(a: Any, b: Any) -> bool:
    return a <= b


def _gt(a: Any, b: Any) -> bool:
    return a > b


def _gte(a: Any, b: Any) -> bool:
    return a >= b


_COMPARISONS: dict[str, tuple[Callable[[Any, Any], bool], str]] = {
    "$lt": (_lt, "<"),
    "$lte": (_lte, "<="),
    "$gt": (_gt, ">"),
    "$gte": (_gte, ">="),
}

OPERATORS = frozenset({"$eq", "$ne", "$in", "$nin", "$exists", *_COMPARISONS})

# JSON type names (as reported by SQLite's json_type) per comparison kind
_KIND_JSON_TYPES = {
    "number": ("integer", "real"),
    "text": ("text",),
    "bool": ("true", "false"),
}


def _kind(value: Any) -> str:
    """Comparison bracket of *value*. Range operators never cross brackets."""
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int | float):
        return "number"
    if isinstance(value, str):
        return "text"
    return type(value).__name__


def _check_field(name: object) -> str:
    if not isinstance(name, str) or not _FIELD_RE.match(name):
        msg = f"Invalid field name in filter: {name!r}"
        raise FilterError(msg)
    return name


def _is_operator_map(value: Any) -> bool:
    return isinstance(value, Mapping) and bool(value) and all(
        isinstance(k, str) and k.startswith("$") for k in value
    )


def _sequence_operand(op: str, operand: Any) -> list[Any]:
    if isinstance(operand, str | bytes | Mapping) or not isinstance(operand, Sequence | set | frozenset):
        msg = f"{op} expects a list, got {type(operand).__name__}"
        raise FilterError(msg)
    return list(operand)


def validate_filter(filter: Filter | None) -> dict[str, Any]:
    """Check *filter* and return it as a plain dict.

    Raises ``FilterError`` for non-mapping filters, bad field names,
    unknown operators, and malformed operands.
    """
    if filter is None:
        return {}
    if not isinstance(filter, Mapping):
        msg = f"Filter must be a mapping, got {type(filter).__name__}"
        raise FilterError(msg)
    for name, condition in filter.items():
        _check_field(name)
        if not _is_operator_map(condition):
            continue
        for op, operand in condition.items():
            if op not in OPERATORS:
                msg = f"Unknown filter operator {op!r} on field {name!r}"
                raise FilterError(msg)
            if op in ("$in", "$nin"):
                _sequence_operand(op, operand)
    return dict(filter)


# -- In-process evaluation --


def _apply(op: str, actual: Any, operand: Any) -> bool:
    present = actual is not _MISSING
    value = actual if present else None
    if op == "$eq":
        return value == operand
    if op == "$ne":
        return value != operand
    if op == "$in":
        return value in _sequence_operand(op, operand)
    if op == "$nin":
        return value not in _sequence_operand(op, operand)
    if op == "$exists":
        return present == bool(operand)
    func, _ = _COMPARISONS[op]
    if value is None or operand is None or _kind(value) != _kind(operand):
        return False
    try:
        return func(value, operand)
    except TypeError:
        return False


def matches(document: Mapping[str, Any], filter: Filter | None) -> bool:
    """Return True if *document* satisfies every condition in *filter*."""
    for name, condition in validate_filter(filter).items():
        actual = document.get(name, _MISSING)
        if _is_operator_map(condition):
            if not all(_apply(op, actual, operand) for op, operand in condition.items()):
                return False
        elif not _apply("$eq", actual, condition):
            return False
    return True


def _check_sort(sort: SortSpec) -> list[tuple[str, int]]:
    checked: list[tuple[str, int]] = []
    for field, direction in sort:
        _check_field(field)
        if direction not in (1, -1):
            msg = f"Sort direction for {field!r} must be 1 or -1, got {direction!r}"
            raise FilterError(msg)
        checked.append((field, direction))
    return checked


def _sort_key(value: Any) -> tuple[Any, ...]:
    """Order values the way SQLite orders ``json_extract`` results.

    Null first, then numbers (booleans count as 0 and 1), then text.
    Lists and objects compare as their compact JSON text.
    """
    if value is None:
        return (0,)
    if isinstance(value, int | float):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    return (2, json.dumps(value, separators=(",", ":"), default=str))


def sort_documents[T: Mapping[str, Any]](documents: Sequence[T], sort: SortSpec = ()) -> list[T]:
    """Return *documents* ordered by *sort*. Stable."""
    result = list(documents)
    # Least significant key first; each pass is stable
    for field, direction in reversed(_check_sort(sort)):

        def key(doc: Mapping[str, Any], _field: str = field) -> tuple[Any, ...]:
            return _sort_key(doc.get(_field))

        result.sort(key=key, reverse=direction == -1)
    return result


# -- SQL compilation (SQLite JSON1) --

_SCALARS = (str, int, float, bool, type(None))


def _scalar(name: str, value: Any) -> Any:
    if not isinstance(value, _SCALARS):
        msg = f"Only scalar values can be compared in SQL filters (field {name!r})"
        raise FilterError(msg)
    return value


def _path(column: str, name: str) -> str:
    return f"json_extract({column}, '$.{name}')"


def _compile_op(column: str, name: str, op: str, operand: Any, params: list[Any]) -> str:
    expr = _path(column, name)
    if op == "$exists":
        return f"json_type({column}, '$.{name}') IS {'NOT ' if operand else ''}NULL"
    if op == "$eq":
        if _scalar(name, operand) is None:
            return f"{expr} IS NULL"
        params.append(operand)
        return f"{expr} = ?"
    if op == "$ne":
        if _scalar(name, operand) is None:
            return f"{expr} IS NOT NULL"
        params.append(operand)
        return f"({expr} IS NULL OR {expr} != ?)"
    if op in ("$in", "$nin"):
        values = [_scalar(name, v) for v in _sequence_operand(op, operand)]
        wants_null = any(v is None for v in values)
        values = [v for v in values if v is not None]
        params.extend(values)
        placeholders = ", ".join("?" * len(values))
        if op == "$in":
            clauses = [f"{expr} IN ({placeholders})"] if values else []
            if wants_null:
                clauses.append(f"{expr} IS NULL")
            return f"({' OR '.join(clauses)})" if clauses else "0"
        clauses = [f"{expr} NOT IN ({placeholders})"] if values else []
        if wants_null:
            clauses.insert(0, f"{expr} IS NOT NULL")
            return f"({' AND '.join(clauses)})"
        return f"({expr} IS NULL OR {clauses[0]})" if clauses else "1"
    _, sql_op = _COMPARISONS[op]
    if _scalar(name, operand) is None:
        return "0"
    types = ", ".join(f"'{t}'" for t in _KIND_JSON_TYPES[_kind(operand)])
    params.append(operand)
    return f"(json_type({column}, '$.{name}') IN ({types}) AND {expr} {sql_op} ?)"


def compile_filter(filter: Filter | None, column: str = "doc") -> tuple[str, list[Any]]:
    """Translate *filter* into a SQL ``WHERE`` clause and its parameters.

    Returns ``("1", [])`` for an empty filter.
    """
    clauses: list[str] = []
    params: list[Any] = []
    for name, condition in validate_filter(filter).items():
        if _is_operator_map(condition):
            for op, operand in condition.items():
                clauses.append(_compile_op(column, name, op, operand, params))
        else:
            clauses.append(_compile_op(column, name, "$eq", condition, params))
    if not clauses:
        return "1", []
    return " AND ".join(clauses), params


def compile_sort(sort: SortSpec, column: str = "doc") -> str:
    """Translate *sort* into a SQL ``ORDER BY`` list, ending in insertion order."""
    terms = [f"{_path(column, field)} {'ASC' if direction == 1 else 'DESC'}" for field, direction in _check_sort(sort)]
    terms.append("rowid ASC")
    return ", ".join(terms)
