"""멤버 관련 Pydantic 요청/응답 스키마 및 프로젝션 정의.

Member Pydantic request/response schemas and query-time projections.
"""

from pydantic import BaseModel, ConfigDict, Field


# === 프로젝션 (Projection) ===

class MemberDto(BaseModel):
    """멤버 프로젝션 — 쿼리 시점에만 생성되는 읽기 전용 결과.

    Member projection built at query time; never persisted or tracked.
    team_name is None when the member has no team.

    Attributes:
        id: 멤버 ID (Member identity)
        username: 사용자 이름 (Username)
        team_name: 소속 팀 이름 (Team name via outer join, None without a team)
    """

    model_config = ConfigDict(frozen=True)

    id: int  # 멤버 ID (Member identity)
    username: str  # 사용자 이름 (Username)
    team_name: str | None = None  # 팀 이름 (Team name, None without a team)


# === 멤버 (Member) 스키마 ===

class MemberCreate(BaseModel):
    """멤버 생성 요청 스키마.

    Member creation request schema.

    Attributes:
        username: 사용자 이름 (Username)
        age: 나이 (Age, default 0)
        team_id: 소속 팀 ID (Team to join, optional; must exist)
    """

    username: str = Field(min_length=1, max_length=255)  # 사용자 이름 (Username)
    age: int = Field(default=0, ge=0)  # 나이 (Age)
    team_id: int | None = None  # 소속 팀 ID (Team identity, optional)


class MemberTeamUpdate(BaseModel):
    """멤버 팀 변경 요청 스키마 (Team assignment request)."""

    team_id: int  # 변경할 팀 ID (Target team identity)


class MemberResponse(BaseModel):
    """멤버 응답 스키마.

    Member response schema returned from API.
    """

    id: int  # 멤버 ID (Member identity)
    username: str  # 사용자 이름 (Username)
    age: int  # 나이 (Age)
    team_id: int | None = None  # 소속 팀 ID (Team identity, None without a team)


class BulkAgePlusRequest(BaseModel):
    """나이 일괄 증가 요청 — age >= min_age인 멤버의 나이를 1 증가.

    Bulk age increment request: every member with age >= min_age gets +1.
    """

    min_age: int = Field(ge=0)  # 기준 나이 (Inclusive lower bound)


class BulkUpdateResponse(BaseModel):
    """일괄 변경 결과 (Bulk update result)."""

    affected: int  # 변경된 행 수 (Number of matched and updated rows)
