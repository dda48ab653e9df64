from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from backend.auth.identity import Identity
from backend.auth.identity_provider import resolve_token
from backend.core.exceptions import UnauthenticatedError
from backend.database import get_db
from backend.models.user import User

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        _, user = resolve_token(db, credentials.credentials)
    except UnauthenticatedError as exc:
        raise HTTPException(status_code=401, detail=exc.message) from exc
    return user


def get_current_identity(user: User = Depends(get_current_user)) -> Identity:
    return Identity.from_user(user)
