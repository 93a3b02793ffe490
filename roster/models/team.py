"""팀 SQLAlchemy ORM 모델 정의.

Team SQLAlchemy ORM model definition.

Tables:
    - teams: 멤버가 소속되는 팀 (Teams that members belong to)
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roster.database import Base


class Team(Base):
    """팀 모델 — 여러 멤버를 소유하는 엔티티.

    Team model — Owns zero or more members (inverse side of Member.team).

    Attributes:
        id: 고유 식별자, 플러시 시점에 부여 (Autoincrement identity, assigned on flush)
        name: 팀 이름 (Team name)

    Relationships:
        members: 소속 멤버 목록 (Members of this team). lazy="raise" — 명시적 로딩만 허용
    """

    __tablename__ = "teams"

    # 팀 고유 식별자 — Team identity (monotonic, never reassigned)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 팀 이름 — Team display name
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # 관계 — 숨은 지연 로딩 대신 접근 시 예외 (Unloaded access raises instead of emitting SQL)
    members = relationship("Member", back_populates="team", lazy="raise")

    def __repr__(self) -> str:
        return f"Team(id={self.id}, name={self.name})"
