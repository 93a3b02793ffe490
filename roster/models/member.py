"""멤버 SQLAlchemy ORM 모델 정의.

Member SQLAlchemy ORM model definition.

Tables:
    - members: 회원 (Members, optionally belonging to a team)
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roster.database import Base
from roster.models.team import Team


class Member(Base):
    """멤버 모델 — 이름과 나이를 가지며 선택적으로 팀에 소속.

    Member model — Username and age, with an optional reference to a Team.
    username and age are mutable after creation; id is not.

    Attributes:
        id: 고유 식별자, 플러시 시점에 부여 (Autoincrement identity, assigned on flush)
        username: 사용자 이름 (Username, not unique)
        age: 나이 (Age in years, default 0)
        team_id: 소속 팀 FK (Team foreign key, nullable)

    Relationships:
        team: 소속 팀 (Owning team). lazy="raise" — RelationResolver 또는 eager 옵션으로만 로딩
    """

    __tablename__ = "members"

    # 멤버 고유 식별자 — Member identity (monotonic, never reassigned)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 사용자 이름 — Display username
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    # 나이 — Age, used by range finders and the bulk age update
    age: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # 소속 팀 FK — Owning team (NULL when the member has no team)
    team_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("teams.id"), nullable=True, index=True)

    # 관계 — Relationships
    team = relationship("Team", back_populates="members", lazy="raise")

    def change_team(self, team: Team) -> None:
        """소속 팀을 변경합니다. 양방향 연관관계는 back_populates가 맞춰줍니다.

        Move this member to another team; the inverse collection follows
        through back_populates.
        """
        self.team = team
        self.team_id = team.id

    def __repr__(self) -> str:
        return f"Member(id={self.id}, username={self.username}, age={self.age})"
