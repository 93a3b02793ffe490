"""멤버 레포지토리 — 멤버 조회/페이징/일괄 변경 쿼리.

Member Repository — Finder, projection, paging and bulk update queries for members.
Extends BaseRepository with the member-specific queries: derived finders
built from predicate descriptions, hand-written joins, DTO projections and
the fetch-join variants used by the relation resolver.
"""

from typing import Iterable

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager, joinedload

from roster.models.member import Member
from roster.models.team import Team
from roster.query.mutations import Increment
from roster.query.predicates import Equals, GreaterThan, GreaterThanOrEqual, In, Predicate, where_clause
from roster.query.sort import Sort
from roster.repositories.base import BaseRepository
from roster.repositories.team_repository import team_repository
from roster.schemas.member import MemberDto
from roster.utils.exceptions import NotFoundError
from roster.utils.pagination import Page, PageRequest, paginate


class MemberRepository(BaseRepository[Member]):
    """멤버 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the members table.
    """

    def __init__(self) -> None:
        """MemberRepository를 초기화합니다.

        Initialize the MemberRepository with the Member model.
        """
        super().__init__(Member)

    async def save(self, db: AsyncSession, entity: Member) -> Member:
        """멤버를 저장합니다. team_id가 지정된 경우 팀 존재 여부를 먼저 확인합니다.

        Persist a member. A bare team_id must point at an existing team.

        Raises:
            NotFoundError: 존재하지 않는 팀을 참조할 때 (team_id references no team)
        """
        # 아직 세션에 없는 엔티티가 자동 플러시에 끌려가지 않도록 (No autoflush before add)
        with db.no_autoflush:
            if entity.team_id is not None and not await team_repository.exists(
                db, Equals("id", entity.team_id)
            ):
                raise NotFoundError(f"Team {entity.team_id} not found")
        return await super().save(db, entity)

    async def assign_team(self, db: AsyncSession, member: Member, team_id: int) -> Member:
        """멤버를 다른 팀으로 옮깁니다.

        Move ``member`` to the team with ``team_id``.

        Raises:
            NotFoundError: 팀이 없을 때 (No team with this identity)
        """
        team: Team = await team_repository.get_or_fail(db, team_id)
        member.change_team(team)
        await db.flush()
        return member

    # === 파생 조회 — Derived finders ===

    async def find_by_username_and_age_greater_than(
        self,
        db: AsyncSession,
        username: str,
        age: int,
    ) -> list[Member]:
        """이름이 일치하고 나이가 ``age``보다 많은 멤버를 조회합니다."""
        return await self.find(db, Equals("username", username), GreaterThan("age", age))

    async def find_by_username(self, db: AsyncSession, username: str) -> list[Member]:
        return await self.find(db, Equals("username", username))

    async def find_one_by_username(self, db: AsyncSession, username: str) -> Member | None:
        """이름으로 단일 멤버를 조회합니다. 동명이인이 있으면 MultipleResultsFound.

        Single-result variant of find_by_username.
        """
        return await self.find_one(db, Equals("username", username))

    async def find_user(self, db: AsyncSession, username: str, age: int) -> list[Member]:
        """이름과 나이가 모두 일치하는 멤버를 조회합니다.

        Retrieve members whose username and age both match exactly.
        """
        query: Select = (
            select(Member)
            .where(Member.username == username, Member.age == age)
            .order_by(Member.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_username_list(self, db: AsyncSession) -> list[str]:
        """모든 멤버의 이름 컬럼만 조회합니다 (Scalar username column, insertion order)."""
        result = await db.execute(select(Member.username).order_by(Member.id))
        return list(result.scalars().all())

    async def find_by_names(self, db: AsyncSession, names: Iterable[str]) -> list[Member]:
        """이름 목록에 포함된 멤버를 조회합니다 (IN 조건).

        Retrieve members whose username is in ``names``; an empty list matches nothing.
        """
        return await self.find(db, In("username", names))

    async def find_member_dto(self, db: AsyncSession, *predicates: Predicate) -> list[MemberDto]:
        """멤버를 (id, username, team_name) 프로젝션으로 조회합니다.

        Project members into MemberDto through an outer join on teams, so a
        member without a team gets ``team_name=None``.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            *predicates: 멤버 조건 (Member predicates, combined with AND)

        Returns:
            list[MemberDto]: 프로젝션 목록 (Projected rows, insertion order)
        """
        query: Select = (
            select(Member.id, Member.username, Team.name.label("team_name"))
            .outerjoin(Team, Member.team_id == Team.id)
            .where(where_clause(Member, predicates))
            .order_by(Member.id)
        )
        result = await db.execute(query)
        return [MemberDto.model_validate(dict(row)) for row in result.mappings().all()]

    # === 페이징 — Paging ===

    async def find_by_age(
        self,
        db: AsyncSession,
        age: int,
        page_request: PageRequest,
    ) -> Page[Member]:
        """나이가 일치하는 멤버를 페이지 단위로 조회합니다.

        Retrieve one page of members with the given age.
        """
        return await self.find_page(db, Equals("age", age), page_request=page_request)

    async def find_member_all_count_by(
        self,
        db: AsyncSession,
        page_request: PageRequest,
    ) -> Page[Member]:
        """팀과 외부 조인한 멤버 페이지를 조회합니다. 카운트는 조인 없이 계산합니다.

        Page through members outer-joined with teams. The total is counted
        with a separate join-free query; an outer join never changes the
        member count.
        """
        query: Select = (
            select(Member)
            .outerjoin(Member.team)
            .order_by(*page_request.sort.to_order_by(Member))
        )
        count_query: Select = select(func.count(Member.id))
        return await paginate(db, query, page_request, count_query=count_query)

    # === 일괄 변경 — Bulk update ===

    async def bulk_age_plus(
        self,
        db: AsyncSession,
        age: int,
        clear_automatically: bool = True,
    ) -> int:
        """나이가 ``age`` 이상인 모든 멤버의 나이를 1 증가시킵니다.

        Add one year to every member aged ``age`` or older in one UPDATE.
        The session is cleared afterwards by default so later reads see the
        new ages.

        Returns:
            int: 변경된 멤버 수 (Number of members updated)
        """
        return await self.bulk_update(
            db,
            [GreaterThanOrEqual("age", age)],
            Increment("age", 1),
            clear_automatically=clear_automatically,
        )

    # === 연관 로딩 — Relation loading ===

    async def find_member_fetch_join(self, db: AsyncSession) -> list[Member]:
        """팀이 있는 멤버를 팀과 함께 한 번의 조인 쿼리로 조회합니다.

        Fetch join: members that have a team, with the team populated from
        the same INNER JOIN. Members without a team are not returned.
        """
        query: Select = (
            select(Member)
            .join(Member.team)
            .options(contains_eager(Member.team))
            .order_by(Member.id)
        )
        result = await db.execute(query)
        return list(result.unique().scalars().all())

    async def find_all_with_team(self, db: AsyncSession, sort: Sort | None = None) -> list[Member]:
        """모든 멤버를 팀과 함께 조회합니다 (팀이 없는 멤버 포함).

        Every member with its team eagerly loaded through a LEFT OUTER JOIN;
        members without a team get ``team=None``.
        """
        return await self.find_all(db, sort=sort, options=[joinedload(Member.team)])

    # === 읽기 전용 — Read-only ===

    async def find_read_only_by_username(self, db: AsyncSession, username: str) -> Member | None:
        """이름으로 멤버를 읽기 전용(세션에서 분리된 상태)으로 조회합니다.

        Load a member detached from the session: changes made to the
        returned object are never flushed. Pending writes are flushed first,
        because an instance already tracked by this session is detached as well.

        Returns:
            Member | None: 분리된 멤버 또는 None (Detached member, or None)
        """
        await db.flush()
        member: Member | None = await self.find_one(db, Equals("username", username))
        if member is not None:
            db.expunge(member)
        return member


# 싱글턴 인스턴스 — Singleton instance
member_repository: MemberRepository = MemberRepository()
