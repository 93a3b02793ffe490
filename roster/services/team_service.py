"""팀 서비스 — 팀 생성/조회 비즈니스 로직.

Team Service — Business logic for creating and reading teams.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from roster.models.team import Team
from roster.repositories.team_repository import team_repository
from roster.schemas.team import TeamCreate, TeamResponse


class TeamService:
    """팀 관련 비즈니스 로직을 처리하는 서비스.

    Service handling team business logic.
    """

    def _to_response(self, team: Team) -> TeamResponse:
        return TeamResponse(id=team.id, name=team.name)

    async def create_team(self, db: AsyncSession, data: TeamCreate) -> TeamResponse:
        """새 팀을 생성합니다 (Create a team).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 팀 생성 데이터 (Team creation data)

        Returns:
            TeamResponse: 생성된 팀 응답 (Created team response)
        """
        team: Team = await team_repository.save(db, Team(name=data.name))
        return self._to_response(team)

    async def list_teams(self, db: AsyncSession) -> list[TeamResponse]:
        teams: list[Team] = await team_repository.find_all(db)
        return [self._to_response(t) for t in teams]

    async def get_team(self, db: AsyncSession, team_id: int) -> TeamResponse:
        """팀을 조회합니다.

        Retrieve one team.

        Raises:
            NotFoundError: 팀을 찾을 수 없을 때 (Team not found)
        """
        team: Team = await team_repository.get_or_fail(db, team_id)
        return self._to_response(team)


# 싱글턴 인스턴스 — Singleton instance
team_service: TeamService = TeamService()
