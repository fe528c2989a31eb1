"""SQLAlchemy модели базы данных."""

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from pr_reviewer.core.database import Base


def utcnow() -> datetime:
    """Текущее время в UTC без tzinfo (так хранится в БД)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class PRStatus(str, enum.Enum):
    """Статус Pull Request."""

    OPEN = "OPEN"
    MERGED = "MERGED"


pr_reviewers = Table(
    "pr_reviewers",
    Base.metadata,
    Column(
        "pr_id",
        String,
        ForeignKey("pull_requests.pull_request_id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "reviewer_id", String, ForeignKey("users.user_id", ondelete="RESTRICT"), primary_key=True
    ),
    Column("created_at", DateTime, default=utcnow, nullable=False),
    Index("idx_pr_reviewers_reviewer", "reviewer_id"),
)


class Team(Base):
    """Модель команды. Участники выбираются запросом по users.team_id."""

    __tablename__ = "teams"
    __table_args__ = (
        UniqueConstraint("team_name", name="uq_teams_team_name"),
        {"comment": "Команды"},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_name = Column(String(255), nullable=False, comment="Название команды")
    created_at = Column(DateTime, default=utcnow, nullable=False, comment="Дата создания")
    updated_at = Column(DateTime, nullable=True, onupdate=utcnow, comment="Дата изменения")


class User(Base):
    """Модель пользователя."""

    __tablename__ = "users"
    __table_args__ = (
        Index("idx_users_team_active", "team_id", "is_active"),
        {"comment": "Пользователи"},
    )

    user_id = Column(String(255), primary_key=True, nullable=False, comment="ID пользователя")
    username = Column(String(255), nullable=False, comment="Имя пользователя")
    team_id = Column(
        Integer,
        ForeignKey("teams.id", ondelete="RESTRICT"),
        nullable=False,
        comment="ID команды",
    )
    is_active = Column(Boolean, default=True, nullable=False, comment="Флаг активности")
    created_at = Column(DateTime, default=utcnow, nullable=False, comment="Дата создания")
    updated_at = Column(DateTime, nullable=True, onupdate=utcnow, comment="Дата изменения")

    team = relationship("Team", lazy="raise")

    @property
    def team_name(self) -> str:
        return self.team.team_name


class PullRequest(Base):
    """Модель Pull Request."""

    __tablename__ = "pull_requests"
    __table_args__ = (
        Index("idx_pr_author", "author_id"),
        {"comment": "Pull Request'ы"},
    )

    pull_request_id = Column(String(255), primary_key=True, nullable=False, comment="ID PR")
    pull_request_name = Column(String(500), nullable=False, comment="Название PR")
    author_id = Column(
        String(255),
        ForeignKey("users.user_id", ondelete="RESTRICT"),
        nullable=False,
        comment="ID автора",
    )
    status = Column(
        String(20), default=PRStatus.OPEN.value, nullable=False, comment="Статус: OPEN или MERGED"
    )
    created_at = Column(DateTime, default=utcnow, nullable=False, comment="Дата создания")
    merged_at = Column(DateTime, nullable=True, comment="Дата merge")

    reviewers = relationship("User", secondary=pr_reviewers, lazy="raise")

    @property
    def reviewer_ids(self) -> list[str]:
        return [reviewer.user_id for reviewer in self.reviewers]
