"""User model definitions."""

from sqlalchemy import Column, DateTime, Integer, String
from backend.core.clock import utc_now
from backend.database import Base

STUDENT_ROLE = "student"
PROFESSOR_ROLE = "professor"
USER_ROLES = (STUDENT_ROLE, PROFESSOR_ROLE)


class User(Base):
    """Represents an application user."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False)  # student/professor
    student_id = Column(String)
    department = Column(String)
    created_at = Column(DateTime, default=utc_now)
