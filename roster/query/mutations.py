"""일괄 변경(mutation) 기술 모듈.

Bulk mutation description module.
A mutation names the column to change and how; the bulk mutator turns it
into the SET part of a single UPDATE statement.
"""

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Numeric, Integer

from roster.query.predicates import resolve_column
from roster.utils.exceptions import ValidationError


class Mutation:
    """일괄 변경의 공통 인터페이스 (Common interface for bulk mutations)."""

    field: str

    def to_values(self, model: type) -> dict[str, Any]:
        raise NotImplementedError


@dataclass(frozen=True)
class Increment(Mutation):
    """숫자 컬럼을 ``by``만큼 증가 (``SET field = field + by``).

    ``by=0`` still counts every matched row but leaves values unchanged.
    """

    field: str
    by: int = 1

    def to_values(self, model: type) -> dict[str, Any]:
        column = resolve_column(model, self.field)
        if not isinstance(column.type, (Integer, Numeric)):
            raise ValidationError(f"Cannot increment non-numeric field '{self.field}'")
        return {self.field: column + self.by}


@dataclass(frozen=True)
class Assign(Mutation):
    """컬럼에 고정 값을 대입 (``SET field = value``)."""

    field: str
    value: Any

    def to_values(self, model: type) -> dict[str, Any]:
        resolve_column(model, self.field)
        return {self.field: self.value}
