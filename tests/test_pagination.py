"""페이지네이션 유틸리티 유닛 테스트.

Pagination utility unit tests — page metadata math, page request
validation, and in-memory pagination (no database).
"""

import math
from types import SimpleNamespace

import pytest

from roster.config import settings
from roster.query import Direction, Sort
from roster.utils.exceptions import ValidationError
from roster.utils.pagination import Page, PageRequest, paginate_sequence


def make_items(*rows: tuple[str, int]) -> list[SimpleNamespace]:
    return [SimpleNamespace(username=username, age=age) for username, age in rows]


class TestPageMetadata:
    """페이지 메타데이터 계산."""

    def test_first_page(self):
        page = Page(content=[1, 2, 3], total_elements=5, number=0, size=3)
        assert page.total_pages == 2
        assert page.is_first is True
        assert page.has_next is True
        assert page.is_last is False
        assert page.has_previous is False
        assert page.number_of_elements == 3

    def test_last_page(self):
        page = Page(content=[4, 5], total_elements=5, number=1, size=3)
        assert page.is_first is False
        assert page.has_next is False
        assert page.is_last is True
        assert page.has_previous is True

    def test_empty_result_has_zero_pages(self):
        page = Page(content=[], total_elements=0, number=0, size=10)
        assert page.total_pages == 0
        assert page.has_next is False
        assert page.is_first is True

    def test_serialized_metadata(self):
        data = Page(content=[1], total_elements=1, number=0, size=20).model_dump()
        assert data["total_pages"] == 1
        assert data["is_first"] is True
        assert data["has_next"] is False

    def test_map_keeps_metadata(self):
        page = Page(content=[1, 2], total_elements=7, number=1, size=2)
        mapped = page.map(lambda n: n * 10)
        assert mapped.content == [10, 20]
        assert (mapped.total_elements, mapped.number, mapped.size) == (7, 1, 2)


class TestPageRequest:
    """페이지 요청 검증."""

    def test_of(self):
        request = PageRequest.of(2, 3)
        assert request.offset == 6
        assert request.sort.is_sorted is False

    @pytest.mark.parametrize("page,size", [(-1, 3), (0, 0), (0, -5)])
    def test_rejects_invalid(self, page, size):
        with pytest.raises(ValidationError):
            PageRequest.of(page, size)

    def test_rejects_size_above_limit(self):
        with pytest.raises(ValidationError):
            PageRequest.of(0, settings.MAX_PAGE_SIZE + 1)

    def test_default_size(self):
        assert PageRequest().size == settings.DEFAULT_PAGE_SIZE


class TestPaginateSequence:
    """메모리 목록 페이지네이션."""

    def test_sorted_first_page(self):
        """member1~5, username 내림차순 첫 페이지."""
        items = make_items(*[(f"member{i}", 10) for i in range(1, 6)])
        request = PageRequest.of(0, 3, Sort.by("username", direction=Direction.DESC))

        page = paginate_sequence(items, request)

        assert [i.username for i in page.content] == ["member5", "member4", "member3"]
        assert page.total_elements == 5
        assert page.total_pages == 2
        assert page.is_first is True
        assert page.has_next is True

    def test_page_past_end_is_empty(self):
        page = paginate_sequence(make_items(("a", 1)), PageRequest.of(3, 2))
        assert page.content == []
        assert page.total_elements == 1
        assert page.has_next is False

    def test_stable_sort_keeps_insertion_order_for_ties(self):
        items = make_items(("a", 20), ("b", 10), ("c", 20), ("d", 10))
        page = paginate_sequence(items, PageRequest.of(0, 10, Sort.by("age")))
        assert [i.username for i in page.content] == ["b", "d", "a", "c"]

        page = paginate_sequence(items, PageRequest.of(0, 10, Sort.by("age", direction=Direction.DESC)))
        assert [i.username for i in page.content] == ["a", "c", "b", "d"]

    def test_none_sorts_first_ascending(self):
        items = make_items(("a", 5), ("b", None), ("c", 1))
        page = paginate_sequence(items, PageRequest.of(0, 10, Sort.by("age")))
        assert [i.username for i in page.content] == ["b", "c", "a"]

    @pytest.mark.parametrize("total", [0, 1, 2, 5, 7, 12])
    @pytest.mark.parametrize("size", [1, 3, 5])
    def test_pages_cover_every_item_once(self, total, size):
        """모든 페이지의 항목 수 합은 전체 수와 같다."""
        items = make_items(*[(f"m{i}", i) for i in range(total)])
        first = paginate_sequence(items, PageRequest.of(0, size))
        assert first.total_pages == math.ceil(total / size)

        seen = []
        for number in range(first.total_pages):
            seen.extend(paginate_sequence(items, PageRequest.of(number, size)).content)
        assert seen == items

    def test_unknown_sort_field_raises(self):
        """항목에 없는 정렬 필드는 정렬 전에 ValidationError."""
        items = make_items(("a", 1))
        with pytest.raises(ValidationError):
            paginate_sequence(items, PageRequest.of(0, 10, Sort.by("nickname")))

    def test_unknown_sort_field_on_empty_sequence(self):
        page = paginate_sequence([], PageRequest.of(0, 10, Sort.by("nickname")))
        assert page.content == []
