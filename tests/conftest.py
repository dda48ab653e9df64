import os
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')

from backend.auth.identity import Identity  # noqa: E402
from backend.database import Base  # noqa: E402
from backend.models import appointment, availability  # noqa: E402,F401
from backend.models.user import PROFESSOR_ROLE, STUDENT_ROLE, User  # noqa: E402

NOW = datetime(2026, 1, 5, 8, 0)


def add_user(db, *, name: str, email: str, role: str) -> Identity:
    user = User(
        name=name,
        email=email,
        hashed_password='not-used',
        role=role,
        student_id='S001' if role == STUDENT_ROLE else None,
        department='Computer Science' if role == PROFESSOR_ROLE else None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return Identity.from_user(user)


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def professor(db) -> Identity:
    return add_user(db, name='Professor P1', email='professorp1@example.edu', role=PROFESSOR_ROLE)


@pytest.fixture
def other_professor(db) -> Identity:
    return add_user(db, name='Professor P2', email='professorp2@example.edu', role=PROFESSOR_ROLE)


@pytest.fixture
def student(db) -> Identity:
    return add_user(db, name='Student A1', email='studenta1@example.edu', role=STUDENT_ROLE)


@pytest.fixture
def other_student(db) -> Identity:
    return add_user(db, name='Student A2', email='studenta2@example.edu', role=STUDENT_ROLE)


@pytest.fixture
def make_user(db):
    def _make_user(name: str, email: str, role: str) -> Identity:
        return add_user(db, name=name, email=email, role=role)

    return _make_user
