"""쿼리 기술(description) 패키지 — 조건, 정렬, 일괄 변경 값 객체.

Query description package — Predicate, sort, and mutation value objects.
Filters are plain data (field, operator, value) compiled to SQLAlchemy
clauses by the repositories instead of parsed from method names or strings.
"""

from roster.query.mutations import Assign, Increment, Mutation
from roster.query.predicates import (
    And,
    Equals,
    GreaterThan,
    GreaterThanOrEqual,
    In,
    LessThan,
    Predicate,
    resolve_column,
)
from roster.query.sort import Direction, Order, Sort

__all__ = [
    "And", "Equals", "GreaterThan", "GreaterThanOrEqual", "In", "LessThan",
    "Predicate", "resolve_column",
    "Assign", "Increment", "Mutation",
    "Direction", "Order", "Sort",
]
