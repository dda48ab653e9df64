"""Appointment model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from backend.core.clock import utc_now
from backend.database import Base

SCHEDULED = "scheduled"
CANCELLED = "cancelled"
COMPLETED = "completed"
APPOINTMENT_STATUSES = (SCHEDULED, CANCELLED, COMPLETED)


class Appointment(Base):
    """Represents a student's reservation of an availability window.

    Rows are never deleted; cancelled appointments stay as an audit trail.
    """
    __tablename__ = "appointments"
    __table_args__ = (
        Index("idx_appointments_student_time", "student_id", "appointment_time"),
        Index("idx_appointments_professor_time", "professor_id", "appointment_time"),
    )

    id = Column(Integer, primary_key=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    professor_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    # Cleared when the free window is later deleted; appointment_time keeps the history.
    availability_id = Column(Integer, ForeignKey("availability.id", ondelete="SET NULL"))
    appointment_time = Column(DateTime, nullable=False)
    status = Column(String, default=SCHEDULED, nullable=False)
    cancelled_by_id = Column(Integer, ForeignKey("users.id"))
    cancellation_reason = Column(String)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    student = relationship("User", foreign_keys=[student_id])
    professor = relationship("User", foreign_keys=[professor_id])
    availability = relationship("Availability")
