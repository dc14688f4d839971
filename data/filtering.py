"""
Complex filters
---------------
Translate ``{"field__suffix": value}`` dictionaries into SQLAlchemy criteria.

Supported suffixes:
    (none) / __eq   equality
    __ne            inequality
    __gt / __gte    greater than (or equal)
    __lt / __lte    lower than (or equal)
    __in            membership in a list

Example:
    apply_filters(query, CandlePoint, {"symbol": "BTCUSDT", "timestamp__gte": start})
"""

from enum import Enum

_OPERATORS = {
    "eq": lambda col, v: col == v,
    "ne": lambda col, v: col != v,
    "gt": lambda col, v: col > v,
    "gte": lambda col, v: col >= v,
    "lt": lambda col, v: col < v,
    "lte": lambda col, v: col <= v,
    "in": lambda col, v: col.in_(list(v)),
}


def parse_key(key: str):
    """Split "timestamp__gte" into ("timestamp", "gte")."""
    field, sep, op = key.rpartition("__")
    if not sep:
        return key, "eq"
    if op not in _OPERATORS:
        raise ValueError(f"Unsupported filter operator '{op}' in '{key}'")
    return field, op


def build_criteria(model, filters: dict) -> list:
    criteria = []
    for key, value in (filters or {}).items():
        field, op = parse_key(key)
        column = getattr(model, field, None)
        if column is None:
            raise ValueError(f"Unknown filter field '{field}' for {model.__name__}")
        if isinstance(value, Enum):
            value = value.value  # enums are stored by value
        elif op == "in":
            value = [v.value if isinstance(v, Enum) else v for v in value]
        criteria.append(_OPERATORS[op](column, value))
    return criteria


def apply_filters(query, model, filters: dict = None,
                  order_by: str = "created_at", direction: str = "desc",
                  page: int = 1, page_size: int = None):
    """
    Apply filters, ordering and pagination to a query.
    Args:
        query: SQLAlchemy Query over ``model``.
        model: Mapped class.
        filters: dict of "field[__op]" -> value.
        order_by: column name to sort by.
        direction: "asc" or "desc".
        page: 1-based page number.
        page_size: rows per page (None = unlimited).
    """
    for criterion in build_criteria(model, filters):
        query = query.filter(criterion)
    if order_by:
        column = getattr(model, order_by)
        query = query.order_by(column.desc() if direction == "desc" else column.asc())
    if page_size:
        query = query.offset(max(page - 1, 0) * page_size).limit(page_size)
    return query
