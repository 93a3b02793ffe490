"""멤버 서비스 — 멤버 생성/조회/페이징/일괄 변경 비즈니스 로직.

Member Service — Business logic for member creation, lookup, paging,
projections, team assignment, and the bulk age update.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from roster.models.member import Member
from roster.query.predicates import Equals, Predicate
from roster.query.sort import Sort
from roster.repositories.member_repository import member_repository
from roster.schemas.member import (
    BulkUpdateResponse,
    MemberCreate,
    MemberDto,
    MemberResponse,
)
from roster.utils.pagination import Page, PageRequest


class MemberService:
    """멤버 관련 비즈니스 로직을 처리하는 서비스.

    Service handling member business logic.
    """

    def _to_response(self, member: Member) -> MemberResponse:
        """멤버 모델을 응답 스키마로 변환합니다.

        Convert a Member model instance to a MemberResponse schema.
        """
        return MemberResponse(
            id=member.id,
            username=member.username,
            age=member.age,
            team_id=member.team_id,
        )

    async def create_member(self, db: AsyncSession, data: MemberCreate) -> MemberResponse:
        """새 멤버를 생성합니다.

        Create a member, optionally in an existing team.

        Raises:
            NotFoundError: 지정한 팀이 없을 때 (team_id references no team)
        """
        member: Member = await member_repository.save(
            db, Member(username=data.username, age=data.age, team_id=data.team_id)
        )
        return self._to_response(member)

    async def get_member(self, db: AsyncSession, member_id: int) -> MemberResponse:
        """멤버를 조회합니다.

        Raises:
            NotFoundError: 멤버를 찾을 수 없을 때 (Member not found)
        """
        member: Member = await member_repository.get_or_fail(db, member_id)
        return self._to_response(member)

    async def list_members(
        self,
        db: AsyncSession,
        page: int,
        size: int,
        sort: list[str],
        age: int | None = None,
    ) -> Page[MemberResponse]:
        """멤버 목록을 페이지 단위로 조회합니다.

        List members one page at a time, optionally filtered by age.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            page: 페이지 번호, 0부터 (Page index, 0-based)
            size: 페이지 크기 (Page size)
            sort: ``field[,asc|desc]`` 정렬 식 목록 (Sort expressions)
            age: 나이 필터 (Optional exact age filter)

        Raises:
            ValidationError: 잘못된 페이지/정렬 요청 (Invalid page or sort request)
        """
        page_request = PageRequest.of(page, size, Sort.parse(sort))
        predicates: list[Predicate] = [Equals("age", age)] if age is not None else []
        result: Page[Member] = await member_repository.find_page(
            db, *predicates, page_request=page_request
        )
        return result.map(self._to_response)

    async def list_member_dtos(self, db: AsyncSession) -> list[MemberDto]:
        return await member_repository.find_member_dto(db)

    async def assign_team(self, db: AsyncSession, member_id: int, team_id: int) -> MemberResponse:
        """멤버의 소속 팀을 변경합니다.

        Move a member to another team.

        Raises:
            NotFoundError: 멤버 또는 팀이 없을 때 (Member or team not found)
        """
        member: Member = await member_repository.get_or_fail(db, member_id)
        member = await member_repository.assign_team(db, member, team_id)
        return self._to_response(member)

    async def bulk_age_plus(self, db: AsyncSession, min_age: int) -> BulkUpdateResponse:
        affected: int = await member_repository.bulk_age_plus(db, min_age)
        return BulkUpdateResponse(affected=affected)


# 싱글턴 인스턴스 — Singleton instance
member_service: MemberService = MemberService()
