from fastapi import APIRouter, Depends, status
from pydantic import AliasChoices, BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from backend.auth import identity_provider
from backend.auth.dependencies import get_current_user
from backend.database import get_db
from backend.models.user import USER_ROLES, User

router = APIRouter(tags=['auth'])

MIN_PASSWORD_LENGTH = 6


def _normalize_email(value: str) -> str:
    normalized = value.strip().lower()
    if not normalized or '@' not in normalized:
        raise ValueError('A valid email is required.')
    return normalized


def _normalize_optional(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip()
    return normalized or None


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str
    role: str
    student_id: str | None = Field(default=None, validation_alias=AliasChoices('student_id', 'studentId'))
    department: str | None = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Name is required.')
        return normalized

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters.')
        return value

    @field_validator('role')
    @classmethod
    def validate_role(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in USER_ROLES:
            raise ValueError('Role must be student or professor.')
        return normalized

    @field_validator('student_id', 'department')
    @classmethod
    def validate_optional_fields(cls, value: str | None) -> str | None:
        return _normalize_optional(value)


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    student_id: str | None = None
    department: str | None = None

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = 'bearer'
    user: UserResponse


def _token_response(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=identity_provider.issue_token(user),
        user=UserResponse.model_validate(user),
    )


@router.post('/register', response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    user = identity_provider.register_user(
        db,
        name=data.name,
        email=data.email,
        password=data.password,
        role=data.role,
        student_id=data.student_id,
        department=data.department,
    )
    return _token_response(user)


@router.post('/login', response_model=TokenResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    _, user = identity_provider.authenticate(db, data.email, data.password)
    return _token_response(user)


@router.get('/me', response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return UserResponse.model_validate(current_user)
