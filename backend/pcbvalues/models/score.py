from sqlalchemy import JSON, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from ..platform.database import Base


class ScoreRecord(Base):
    __tablename__ = "scores"

    id = Column(Integer, primary_key=True, index=True)
    # Submitted names are unique; a resubmission overwrites the row in place.
    name = Column(String, unique=True, index=True, nullable=False)
    flags = Column(Integer, nullable=False, default=0)
    stats = Column(JSON, nullable=False)
    edition = Column(String(1), nullable=True)
    digest = Column(String, nullable=True)
    version = Column(String, nullable=True)
    answered_at = Column(String, nullable=True)
    takes = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
