from sqlalchemy import (
    Column,
    String,
    DateTime,
    JSON,
    Integer,
    Boolean,
    Index,
)
from sqlalchemy.sql import func
from .db import Base
from .time_utils import utc_now


class Match(Base):
    __tablename__ = "match"
    id = Column(String, primary_key=True)
    # 11-digit numeric share code handed out to scorers
    code = Column(String(11), nullable=False, unique=True)
    court_number = Column(Integer, nullable=True)
    type = Column(String, nullable=False, default="tennis")
    format = Column(String, nullable=False, default="singles")
    state = Column(JSON, nullable=False)
    history = Column(JSON, nullable=False, default=list)
    is_completed = Column(Boolean, nullable=False, default=False)
    # newest-first listings and court lookups order on this
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        Index("ix_match_court_active", "court_number", "is_completed"),
        Index("ix_match_created_at", "created_at"),
    )
