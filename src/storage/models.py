"""SQLAlchemy models for the cfrss database."""

from datetime import datetime

from sqlalchemy import create_engine, Column, Integer, BigInteger, DateTime, JSON, Index
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class RecentActionModel(Base):
    """Database model for a Codeforces recent action."""
    __tablename__ = "recent_actions"

    # SQLite only autoincrements INTEGER primary keys
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)

    # Creation time reported by Codeforces, unix seconds
    time_seconds = Column(BigInteger, nullable=False)

    # Payload, stored untouched
    blog_entry = Column(JSON(none_as_null=True))
    comment = Column(JSON(none_as_null=True))

    inserted_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index('idx_recent_actions_time_seconds', 'time_seconds'),
    )


def init_db(database_url: str):
    """Initialize database and create all tables."""
    engine = create_engine(database_url, echo=False, pool_pre_ping=True)
    Base.metadata.create_all(engine)
    return engine
