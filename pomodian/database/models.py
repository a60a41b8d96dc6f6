"""SQLAlchemy ORM models for Pomodian."""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class Session(Base):
    """One completed interval (work or break).  Rows are never updated."""

    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime, nullable=False, index=True)    # naive UTC
    mode = Column(String(20), nullable=False)   # work | short_break | long_break
    duration_seconds = Column(Integer, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<Session id={self.id} mode={self.mode} "
            f"duration={self.duration_seconds}s>"
        )
