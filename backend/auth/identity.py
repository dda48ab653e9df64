"""Caller identity passed explicitly into every scheduling operation."""

from dataclasses import dataclass

from backend.core.exceptions import ForbiddenError
from backend.models.user import PROFESSOR_ROLE, STUDENT_ROLE, User


@dataclass(frozen=True)
class Identity:
    user_id: int
    role: str

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(user_id=user.id, role=user.role)

    @property
    def is_professor(self) -> bool:
        return self.role == PROFESSOR_ROLE

    @property
    def is_student(self) -> bool:
        return self.role == STUDENT_ROLE


def require_role(identity: Identity, role: str) -> None:
    if identity.role != role:
        raise ForbiddenError(f"Only {role}s can perform this action.")
