"""조건/정렬/변경 기술 테스트.

Predicate, sort and mutation description tests — SQL compilation against
the members table, in-memory evaluation, field validation, and sort stability.
"""

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.dialects import postgresql
from sqlalchemy.ext.asyncio import AsyncSession

from roster.models import Member, Team
from roster.query import (
    And,
    Assign,
    Direction,
    Equals,
    GreaterThan,
    GreaterThanOrEqual,
    In,
    Increment,
    LessThan,
    Order,
    Sort,
)
from roster.repositories.member_repository import member_repository
from roster.repositories.team_repository import team_repository
from roster.utils.exceptions import ValidationError

ROWS = [("AAA", 10), ("BBB", 19), ("AAA", 20), ("CCC", 21), ("BBB", 40), ("DDD", 20)]


@pytest_asyncio.fixture
async def members(db: AsyncSession) -> list[Member]:
    result = []
    for username, age in ROWS:
        result.append(await member_repository.save(db, Member(username=username, age=age)))
    return result


class TestPredicates:
    """조건 실행 테스트."""

    @pytest.mark.parametrize("predicates", [
        (Equals("username", "AAA"),),
        (GreaterThan("age", 19),),
        (GreaterThanOrEqual("age", 20),),
        (LessThan("age", 20),),
        (In("username", ["BBB", "DDD"]),),
        (Equals("username", "AAA"), GreaterThan("age", 15)),
        (And(GreaterThanOrEqual("age", 19), In("username", ("BBB", "CCC"))),),
        (In("age", []),),
        (In("team_id", [None]),),
        (),
    ])
    async def test_find_matches_full_scan(self, db: AsyncSession, members, predicates):
        """find 결과 수는 전체 조회 후 matches로 거른 수와 같다."""
        found = await member_repository.find(db, *predicates)
        everything = await member_repository.find_all(db)
        expected = [m for m in everything if all(p.matches(m) for p in predicates)]

        assert found == expected
        assert await member_repository.count(db, *predicates) == len(expected)

    async def test_equals_none_is_null(self, db: AsyncSession, members):
        assert len(await member_repository.find(db, Equals("team_id", None))) == len(ROWS)
        assert Equals("team_id", None).matches(members[0]) is True

    async def test_exists(self, db: AsyncSession, members):
        assert await member_repository.exists(db, Equals("username", "CCC")) is True
        assert await member_repository.exists(db, Equals("username", "ZZZ")) is False

    async def test_unknown_field_raises(self, db: AsyncSession, members):
        """매핑되지 않은 필드는 SQL 실행 전에 ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            await member_repository.find(db, Equals("nickname", "x"))
        assert exc_info.value.status_code == 400

    async def test_relationship_is_not_a_column(self, db: AsyncSession):
        with pytest.raises(ValidationError):
            await member_repository.find(db, Equals("team", None))

    def test_in_rejects_plain_string(self):
        with pytest.raises(ValidationError):
            In("username", "AAA")

    def test_in_with_null_never_matches(self):
        member = Member(username="x", age=1, team_id=None)
        assert In("team_id", [None]).matches(member) is False
        assert In("team_id", [None, 1]).matches(Member(username="y", age=1, team_id=1)) is True

    def test_comparison_with_null_never_matches(self):
        member = Member(username="x", age=None)
        assert GreaterThan("age", 1).matches(member) is False
        assert LessThan("age", 1).matches(member) is False


class TestSort:
    """정렬 테스트."""

    async def test_sort_is_stable_ascending(self, db: AsyncSession, members):
        """같은 키는 삽입 순서 유지."""
        result = await member_repository.find(db, sort=Sort.by("age"))
        assert [(m.username, m.age) for m in result] == [
            ("AAA", 10), ("BBB", 19), ("AAA", 20), ("DDD", 20), ("CCC", 21), ("BBB", 40),
        ]

    async def test_sort_is_stable_descending(self, db: AsyncSession, members):
        result = await member_repository.find(db, sort=Sort.by("age", direction=Direction.DESC))
        assert [(m.username, m.age) for m in result] == [
            ("BBB", 40), ("CCC", 21), ("AAA", 20), ("DDD", 20), ("BBB", 19), ("AAA", 10),
        ]

    async def test_multi_key_sort(self, db: AsyncSession, members):
        sort = Sort.by("username").and_(Sort.by("age", direction=Direction.DESC))
        result = await member_repository.find(db, sort=sort)
        assert [(m.username, m.age) for m in result] == [
            ("AAA", 20), ("AAA", 10), ("BBB", 40), ("BBB", 19), ("CCC", 21), ("DDD", 20),
        ]

    async def test_in_memory_sort_matches_sql(self, db: AsyncSession, members):
        """메모리 정렬과 SQL 정렬 결과가 같다."""
        sort = Sort.by("age", direction=Direction.DESC).and_(Sort.by("username"))
        from_sql = await member_repository.find(db, sort=sort)
        assert sort.apply(members) == from_sql

    async def test_unknown_sort_field_raises(self, db: AsyncSession, members):
        with pytest.raises(ValidationError):
            await member_repository.find(db, sort=Sort.by("nickname"))

    def test_parse(self):
        sort = Sort.parse(["age,desc", "username", " team_id , ASC "])
        assert sort.orders == (
            Order("age", Direction.DESC),
            Order("username", Direction.ASC),
            Order("team_id", Direction.ASC),
        )

    @pytest.mark.parametrize("expression", ["age,sideways", ",asc", ""])
    def test_parse_rejects_bad_expressions(self, expression):
        with pytest.raises(ValidationError):
            Sort.parse([expression])


class TestMutations:
    """일괄 변경 기술 테스트."""

    async def test_increment_non_numeric_raises(self, db: AsyncSession, members):
        with pytest.raises(ValidationError):
            await member_repository.bulk_update(db, [], Increment("username", 1))

    async def test_unknown_field_raises_before_update(self, db: AsyncSession, members):
        with pytest.raises(ValidationError):
            await member_repository.bulk_update(db, [Equals("nickname", "x")], Increment("age"))
        db.expunge_all()
        assert [m.age for m in await member_repository.find_all(db)] == [age for _, age in ROWS]

    async def test_assign(self, db: AsyncSession, members):
        affected = await member_repository.bulk_update(
            db, [Equals("username", "BBB")], Assign("age", 0), clear_automatically=True
        )
        assert affected == 2
        assert [m.age for m in await member_repository.find_by_username(db, "BBB")] == [0, 0]

    async def test_count_equals_prior_matches(self, db: AsyncSession, members):
        """변경 수는 변경 전 조건에 일치한 행 수와 같다."""
        predicate = GreaterThanOrEqual("age", 20)
        before = await member_repository.count(db, predicate)
        affected = await member_repository.bulk_update(db, [predicate], Increment("age", 5))
        assert affected == before == 4


class TestNullOrdering:
    """NULL 정렬 위치 테스트."""

    def test_order_by_places_nulls_explicitly(self):
        """DB 기본값과 무관하게 오름차순 NULL 먼저, 내림차순 NULL 나중."""
        sort = Sort.by("team_id").and_(Sort.by("age", direction=Direction.DESC))
        sql = str(select(Member).order_by(*sort.to_order_by(Member)).compile(dialect=postgresql.dialect()))
        assert "members.team_id ASC NULLS FIRST" in sql
        assert "members.age DESC NULLS LAST" in sql

    @pytest.mark.parametrize("direction", [Direction.ASC, Direction.DESC])
    async def test_sql_null_order_matches_in_memory(self, db: AsyncSession, direction):
        team = await team_repository.save(db, Team(name="teamA"))
        saved = [
            await member_repository.save(db, Member(username=f"m{i}", age=i, team_id=team_id))
            for i, team_id in enumerate([team.id, None, team.id, None])
        ]
        sort = Sort.by("team_id", direction=direction)

        from_sql = await member_repository.find(db, sort=sort)

        assert from_sql == sort.apply(saved)
        assert (from_sql[0].team_id is None) is (direction is Direction.ASC)
