"""정렬 기술 모듈.

Sort description module.
A Sort is an ordered list of (field, direction) pairs. It compiles to an
ORDER BY list for SQL and to a sequence of stable sorts for in-memory data.
Ties are always broken by the original (insertion) order.
"""

from dataclasses import dataclass, field
from enum import Enum
from operator import attrgetter
from typing import Any, Iterable, Sequence, TypeVar

from sqlalchemy import inspect
from sqlalchemy.sql.elements import ColumnElement

from roster.query.predicates import resolve_column
from roster.utils.exceptions import ValidationError

T = TypeVar("T")


class Direction(str, Enum):
    """정렬 방향 (Sort direction)."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class Order:
    """단일 정렬 키 (One sort key)."""

    field: str
    direction: Direction = Direction.ASC

    @property
    def is_descending(self) -> bool:
        return self.direction is Direction.DESC


@dataclass(frozen=True)
class Sort:
    """다중 키 정렬. 앞선 키가 우선합니다 (Multi-key sort, earlier keys win).

    Usage:
        Sort.by("username", direction=Direction.DESC)
        Sort.by("age").and_(Sort.by("username", direction=Direction.DESC))
        Sort.parse(["age,desc", "username"])
    """

    orders: tuple[Order, ...] = field(default_factory=tuple)

    @classmethod
    def by(cls, *fields: str, direction: Direction = Direction.ASC) -> "Sort":
        return cls(tuple(Order(name, direction) for name in fields))

    @classmethod
    def unsorted(cls) -> "Sort":
        return cls()

    @classmethod
    def parse(cls, expressions: Iterable[str]) -> "Sort":
        """``"field"`` 또는 ``"field,asc|desc"`` 형식의 문자열을 해석합니다.

        Parse ``field[,direction]`` expressions, e.g. from a ``sort`` query param.

        Raises:
            ValidationError: 방향 값이 잘못되었을 때 (Unknown direction)
        """
        orders: list[Order] = []
        for expression in expressions:
            name, _, raw_direction = expression.partition(",")
            name = name.strip()
            if not name:
                raise ValidationError(f"Empty sort field in '{expression}'")
            try:
                direction = Direction((raw_direction.strip() or "asc").lower())
            except ValueError:
                raise ValidationError(f"Unknown sort direction in '{expression}'") from None
            orders.append(Order(name, direction))
        return cls(tuple(orders))

    def and_(self, other: "Sort") -> "Sort":
        return Sort(self.orders + other.orders)

    @property
    def is_sorted(self) -> bool:
        return bool(self.orders)

    def to_order_by(self, model: type) -> list[ColumnElement[Any]]:
        """ORDER BY 절 목록으로 변환합니다. 기본키 오름차순이 마지막 동점 처리 키.

        Compile to an ORDER BY list. The primary key ascending is appended as
        the final tie-breaker so equal keys keep insertion order.

        Raises:
            ValidationError: 매핑되지 않은 필드일 때 (Unknown field)
        """
        clauses: list[ColumnElement[Any]] = []
        for order in self.orders:
            column = resolve_column(model, order.field)
            # NULL 위치 고정 — NULLs first ascending, last descending, as in ``apply``
            clauses.append(
                column.desc().nulls_last() if order.is_descending else column.asc().nulls_first()
            )
        for pk in inspect(model).primary_key:
            clauses.append(pk.asc())
        return clauses

    def apply(self, items: Sequence[T]) -> list[T]:
        """메모리 상의 목록을 안정 정렬합니다 (Stable in-memory multi-key sort).

        Sorts by the last key first so earlier keys take precedence; Python's
        sort is stable, including with ``reverse=True``.

        Raises:
            ValidationError: 항목에 없는 정렬 필드 (An item lacks a sort field)
        """
        result = list(items)
        for order in self.orders:
            if any(not hasattr(item, order.field) for item in result):
                raise ValidationError(f"Unknown sort field '{order.field}'")
        for order in reversed(self.orders):
            getter = attrgetter(order.field)
            # None은 오름차순에서 맨 앞 (None sorts first ascending)
            result.sort(
                key=lambda item: (getter(item) is not None, getter(item)),
                reverse=order.is_descending,
            )
        return result
