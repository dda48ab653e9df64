import logging
from contextlib import contextmanager
from threading import Lock
from typing import Iterator

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from backend.core import config
from backend.core.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


def _connect_args(url: str) -> dict:
    # FastAPI runs sync endpoints on a threadpool.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    config.DATABASE_URL,
    echo=config.DATABASE_ECHO,
    pool_pre_ping=True,
    connect_args=_connect_args(config.DATABASE_URL),
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_scheduling_schema_checked = False

SCHEDULING_INDEXES = (
    'CREATE INDEX IF NOT EXISTS idx_availability_professor_start ON availability(professor_id, start_time)',
    'CREATE INDEX IF NOT EXISTS idx_availability_booked_start ON availability(is_booked, start_time)',
    'CREATE INDEX IF NOT EXISTS idx_appointments_student_time ON appointments(student_id, appointment_time)',
    'CREATE INDEX IF NOT EXISTS idx_appointments_professor_time ON appointments(professor_id, appointment_time)',
)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """Commit everything done inside the block, or roll all of it back.

    Database failures surface as StoreUnavailableError so callers never see
    driver exceptions; scheduling errors raised inside the block propagate
    unchanged after the rollback.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Unit of work failed; transaction rolled back.')
        raise StoreUnavailableError() from exc
    except Exception:
        db.rollback()
        raise


def ensure_scheduling_schema(bind: Engine | None = None) -> None:
    """Bring tables created by older releases up to the current layout."""
    global _scheduling_schema_checked

    use_default = bind is None
    if use_default and _scheduling_schema_checked:
        return

    target = bind or engine

    with _schema_lock:
        if use_default and _scheduling_schema_checked:
            return

        inspector = inspect(target)
        table_names = inspector.get_table_names()

        with target.begin() as connection:
            if 'availability' in table_names:
                existing_columns = {column['name'] for column in inspector.get_columns('availability')}
                migration_steps = [
                    ('version', 'ALTER TABLE availability ADD COLUMN version INTEGER NOT NULL DEFAULT 0'),
                    ('updated_at', 'ALTER TABLE availability ADD COLUMN updated_at TIMESTAMP'),
                ]
                for column_name, statement in migration_steps:
                    if column_name not in existing_columns:
                        logger.info('Adding availability.%s column', column_name)
                        connection.execute(text(statement))

            if 'availability' in table_names and 'appointments' in table_names:
                for statement in SCHEDULING_INDEXES:
                    connection.execute(text(statement))

        if use_default:
            _scheduling_schema_checked = True
