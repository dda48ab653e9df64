"""Availability model definitions."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer
from sqlalchemy.orm import relationship

from backend.core.clock import utc_now
from backend.database import Base


class Availability(Base):
    """A free time window a professor opened for booking.

    ``version`` is bumped on every booked/free flip so state changes can be
    written as compare-and-swap updates.
    """
    __tablename__ = "availability"
    __table_args__ = (
        Index("idx_availability_professor_start", "professor_id", "start_time"),
        Index("idx_availability_booked_start", "is_booked", "start_time"),
    )

    id = Column(Integer, primary_key=True)
    professor_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    is_booked = Column(Boolean, default=False, nullable=False)
    booked_by_id = Column(Integer, ForeignKey("users.id"))
    version = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    professor = relationship("User", foreign_keys=[professor_id])
    booked_by = relationship("User", foreign_keys=[booked_by_id])
