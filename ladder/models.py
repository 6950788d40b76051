from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, String

from .database import Base


def utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        Index("idx_users_username", "username"),
    )

    id = Column(Integer, primary_key=True)
    username = Column(String(50), unique=True, nullable=False)
    password_hash = Column("password", String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class Player(Base):
    __tablename__ = "players"
    __table_args__ = (
        Index("idx_players_name", "name"),
        Index("idx_players_victories", "victories"),
    )

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
    victories = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class Match(Base):
    """Append-only; players are referenced by name, not by foreign key."""

    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint("first_player_name != second_player_name", name="different_players"),
        Index("idx_matches_first_player", "first_player_name"),
        Index("idx_matches_second_player", "second_player_name"),
        Index("idx_matches_date", "match_date"),
    )

    id = Column(Integer, primary_key=True)
    first_player_name = Column(String(100), nullable=False)
    second_player_name = Column(String(100), nullable=False)
    first_player_score = Column(Integer, nullable=False)
    second_player_score = Column(Integer, nullable=False)
    match_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    created_at = Column(DateTime(timezone=True), default=utcnow)
