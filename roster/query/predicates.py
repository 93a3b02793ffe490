"""조건(predicate) 기술 모듈.

Predicate description module.
A filter is a small value object naming a mapped column, an operator and a
value. Repositories compile predicates to SQLAlchemy WHERE clauses; the same
objects can be evaluated against loaded instances with ``matches``.
Several predicates passed together are combined with AND.

Usage:
    member_repository.find(db, Equals("username", "AAA"), GreaterThan("age", 15))
    member_repository.find(db, In("username", ["AAA", "BBB"]))
"""

import operator
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Iterable

from sqlalchemy import and_, inspect, true
from sqlalchemy.orm import InstrumentedAttribute
from sqlalchemy.sql.elements import ColumnElement

from roster.utils.exceptions import ValidationError


def resolve_column(model: type, field_name: str) -> InstrumentedAttribute:
    """모델의 매핑된 컬럼 속성을 반환합니다. 없으면 ValidationError.

    Return the mapped column attribute ``field_name`` of ``model``.

    Raises:
        ValidationError: 매핑된 컬럼이 아닐 때 (Not a mapped column of the model)
    """
    mapper = inspect(model)
    if field_name not in mapper.columns:
        raise ValidationError(f"Unknown field '{field_name}' on {model.__name__}")
    return getattr(model, field_name)


class Predicate:
    """모든 조건의 공통 인터페이스 (Common interface for predicate descriptions)."""

    def to_clause(self, model: type) -> ColumnElement[bool]:
        raise NotImplementedError

    def matches(self, obj: Any) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class _Comparison(Predicate):
    """단일 컬럼 비교 조건 (Single column comparison)."""

    field: str
    value: Any
    op: ClassVar[Callable[[Any, Any], Any]]

    def to_clause(self, model: type) -> ColumnElement[bool]:
        column = resolve_column(model, self.field)
        return type(self).op(column, self.value)

    def matches(self, obj: Any) -> bool:
        current = getattr(obj, self.field)
        # NULL과의 비교는 SQL과 동일하게 불일치 (NULL never compares true, as in SQL)
        if current is None or self.value is None:
            return False
        return bool(type(self).op(current, self.value))


@dataclass(frozen=True)
class Equals(_Comparison):
    """``field == value``. ``value=None``은 IS NULL로 컴파일됩니다."""

    op = operator.eq

    def matches(self, obj: Any) -> bool:
        current = getattr(obj, self.field)
        if self.value is None:
            return current is None
        return current == self.value


@dataclass(frozen=True)
class GreaterThan(_Comparison):
    """``field > value``."""

    op = operator.gt


@dataclass(frozen=True)
class GreaterThanOrEqual(_Comparison):
    """``field >= value``."""

    op = operator.ge


@dataclass(frozen=True)
class LessThan(_Comparison):
    """``field < value``."""

    op = operator.lt


@dataclass(frozen=True, init=False)
class In(Predicate):
    """``field IN (values)``. 빈 목록은 아무것도 매칭하지 않습니다 (Empty list matches nothing)."""

    field: str
    values: tuple[Any, ...]

    def __init__(self, field: str, values: Iterable[Any]) -> None:
        if isinstance(values, (str, bytes)):
            raise ValidationError(f"In({field!r}) expects a collection of values, not a string")
        object.__setattr__(self, "field", field)
        object.__setattr__(self, "values", tuple(values))

    def to_clause(self, model: type) -> ColumnElement[bool]:
        return resolve_column(model, self.field).in_(self.values)

    def matches(self, obj: Any) -> bool:
        current = getattr(obj, self.field)
        # SQL과 동일하게 NULL은 IN 목록과 일치하지 않음 (NULL is never IN anything)
        return current is not None and current in self.values


@dataclass(frozen=True, init=False)
class And(Predicate):
    """여러 조건의 논리곱 (Conjunction of predicates)."""

    predicates: tuple[Predicate, ...]

    def __init__(self, *predicates: Predicate) -> None:
        object.__setattr__(self, "predicates", tuple(predicates))

    def to_clause(self, model: type) -> ColumnElement[bool]:
        return where_clause(model, self.predicates)

    def matches(self, obj: Any) -> bool:
        return all(p.matches(obj) for p in self.predicates)


def where_clause(model: type, predicates: Iterable[Predicate]) -> ColumnElement[bool]:
    """조건 목록을 하나의 AND 절로 컴파일합니다. 빈 목록은 항상 참.

    Compile predicates into a single AND clause; no predicates means TRUE.
    Every field is validated before the clause is returned.
    """
    clauses = [p.to_clause(model) for p in predicates]
    if not clauses:
        return true()
    if len(clauses) == 1:
        return clauses[0]
    return and_(*clauses)
