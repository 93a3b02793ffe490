"""페이지네이션 유틸리티 모듈.

Pagination utility module for SQLAlchemy async queries.
Provides the PageRequest/Page models and paginate functions shared by every
paged finder. Page numbers are 0-based.
"""

import math
from typing import Any, Callable, Generic, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roster.config import settings
from roster.query.sort import Sort
from roster.utils.exceptions import ValidationError

T = TypeVar("T")
U = TypeVar("U")


class PageRequest(BaseModel):
    """페이지 요청 — 페이지 번호(0부터), 크기, 정렬.

    Page request: 0-based page index, page size, and optional sort.

    Attributes:
        page: 요청 페이지 번호, 0부터 시작 (Page index, 0-based)
        size: 페이지당 항목 수 (Items per page)
        sort: 정렬 조건 (Sort applied before slicing)
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    page: int = Field(default=0, ge=0)
    size: int = Field(default_factory=lambda: settings.DEFAULT_PAGE_SIZE, gt=0)
    sort: Sort = Field(default_factory=Sort.unsorted)

    @classmethod
    def of(cls, page: int, size: int, sort: Sort | None = None) -> "PageRequest":
        """검증된 페이지 요청을 생성합니다.

        Build a validated page request.

        Raises:
            ValidationError: page < 0, size <= 0, 또는 최대 크기 초과
                             (Negative page, non-positive size, or size above MAX_PAGE_SIZE)
        """
        if page < 0:
            raise ValidationError("Page index must not be negative")
        if size <= 0:
            raise ValidationError("Page size must be greater than zero")
        if size > settings.MAX_PAGE_SIZE:
            raise ValidationError(f"Page size must not exceed {settings.MAX_PAGE_SIZE}")
        return cls(page=page, size=size, sort=sort or Sort.unsorted())

    @property
    def offset(self) -> int:
        return self.page * self.size


class Page(BaseModel, Generic[T]):
    """페이지네이션 결과 모델.

    Pagination result model.
    Holds the page content plus the metadata derived from the total count.

    Attributes:
        content: 현재 페이지 항목 목록 (Items for the current page)
        total_elements: 조건에 맞는 전체 항목 수 (Matches across all pages, counted before slicing)
        number: 현재 페이지 번호 — 0부터 시작 (Current page, 0-indexed)
        size: 페이지당 항목 수 (Requested page size)
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    content: list[T]
    total_elements: int
    number: int
    size: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        """전체 페이지 수, 항목이 없으면 0 (ceil(total/size), 0 when empty)."""
        return math.ceil(self.total_elements / self.size) if self.size else 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_first(self) -> bool:
        return self.number == 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_next(self) -> bool:
        return self.number + 1 < self.total_pages

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_last(self) -> bool:
        return not self.has_next

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_previous(self) -> bool:
        return self.number > 0

    def map(self, converter: Callable[[T], U]) -> "Page[U]":
        """메타데이터를 유지한 채 항목을 변환합니다 (e.g. 엔티티 → DTO).

        Convert each item, keeping the paging metadata.
        """
        return Page[Any](
            content=[converter(item) for item in self.content],
            total_elements=self.total_elements,
            number=self.number,
            size=self.size,
        )

    def __iter__(self):  # type: ignore[override]
        return iter(self.content)


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page_request: PageRequest,
    count_query: Select[Any] | None = None,
    scalars: bool = True,
) -> Page[Any]:
    """SQLAlchemy 쿼리에 대한 페이지네이션을 수행합니다.

    Execute a paginated SQLAlchemy query, returning a Page.
    Runs two queries: one for the total count (via subquery, or the supplied
    ``count_query``) and one for the page of results with OFFSET/LIMIT.
    The sort must already be applied to ``query``; a page past the end
    returns empty content.

    Args:
        db: 비동기 DB 세션 (Async database session)
        query: 정렬된 SQLAlchemy Select 쿼리 (Sorted base query)
        page_request: 페이지 요청 (Page index, size and sort)
        count_query: 별도 카운트 쿼리 (Optional lighter count query, e.g. without joins)
        scalars: True면 첫 컬럼(엔티티)만, False면 Row 반환 (Return entities or rows)

    Returns:
        Page[Any]: 페이지 결과 (Page of items with metadata)
    """
    # 전체 개수 조회 — 서브쿼리로 감싸서 COUNT 실행 (Count total via subquery)
    if count_query is None:
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total: int = (await db.execute(count_query)).scalar() or 0

    # 페이지 항목 조회 — OFFSET/LIMIT 적용 (Fetch page items with offset/limit)
    result = await db.execute(query.offset(page_request.offset).limit(page_request.size))
    items: Sequence[Any] = result.scalars().all() if scalars else result.all()

    return Page[Any](
        content=list(items),
        total_elements=total,
        number=page_request.page,
        size=page_request.size,
    )


def paginate_sequence(items: Sequence[T], page_request: PageRequest) -> Page[T]:
    """이미 메모리에 있는 목록을 정렬 후 잘라 페이지로 만듭니다.

    Sort (stable) then slice an in-memory sequence with the same semantics
    as ``paginate``.
    """
    ordered = page_request.sort.apply(items)
    start = page_request.offset
    return Page[Any](
        content=ordered[start:start + page_request.size],
        total_elements=len(ordered),
        number=page_request.page,
        size=page_request.size,
    )
