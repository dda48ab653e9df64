"""Professor-owned availability windows.

Windows owned by the same professor never overlap under half-open
``[start_time, end_time)`` semantics, whatever their booking state.
"""

import logging
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, joinedload

from backend.auth.identity import Identity, require_role
from backend.core import config
from backend.core.clock import Clock, to_utc_naive, utc_now
from backend.core.exceptions import (
    InvalidRangeError,
    NotFoundError,
    OverlapConflictError,
    StoreUnavailableError,
    WindowBookedError,
)
from backend.database import unit_of_work
from backend.models.appointment import Appointment
from backend.models.availability import Availability
from backend.models.user import PROFESSOR_ROLE, User

logger = logging.getLogger(__name__)


def find_overlapping_window(
    db: Session,
    professor_id: int,
    start_time: datetime,
    end_time: datetime,
) -> Availability | None:
    return db.query(Availability).filter(
        Availability.professor_id == professor_id,
        Availability.start_time < end_time,
        Availability.end_time > start_time,
    ).first()


class AvailabilityManager:
    def __init__(self, db: Session, clock: Clock = utc_now) -> None:
        self.db = db
        self.clock = clock

    def create_window(self, identity: Identity, start_time: datetime, end_time: datetime) -> Availability:
        require_role(identity, PROFESSOR_ROLE)

        start_time = to_utc_naive(start_time)
        end_time = to_utc_naive(end_time)
        if start_time >= end_time:
            raise InvalidRangeError()

        attempts = config.OVERLAP_CHECK_RETRIES + 1
        for attempt in range(1, attempts + 1):
            try:
                window = self._insert_without_overlap(identity.user_id, start_time, end_time)
            except StoreUnavailableError as exc:
                # Lock contention between concurrent creators is the only failure worth a retry.
                if attempt == attempts or not isinstance(exc.__cause__, OperationalError):
                    raise
                logger.warning(
                    'Retrying window creation for professor %s after store conflict (attempt %s)',
                    identity.user_id,
                    attempt,
                )
                continue

            logger.info(
                'Professor %s opened window %s [%s, %s)',
                identity.user_id,
                window.id,
                window.start_time.isoformat(),
                window.end_time.isoformat(),
            )
            return window

        raise StoreUnavailableError()

    def _insert_without_overlap(self, professor_id: int, start_time: datetime, end_time: datetime) -> Availability:
        with unit_of_work(self.db):
            # Serialises scan+insert per professor on databases with row locks.
            self.db.query(User.id).filter(User.id == professor_id).with_for_update().first()

            overlapping = find_overlapping_window(self.db, professor_id, start_time, end_time)
            if overlapping is not None:
                logger.warning(
                    'Rejected window [%s, %s) for professor %s: overlaps window %s',
                    start_time.isoformat(),
                    end_time.isoformat(),
                    professor_id,
                    overlapping.id,
                )
                raise OverlapConflictError()

            window = Availability(
                professor_id=professor_id,
                start_time=start_time,
                end_time=end_time,
                is_booked=False,
                version=0,
            )
            self.db.add(window)
            self.db.flush()

        self.db.refresh(window)
        return window

    def list_available(self, identity: Identity, professor_id: int, after: datetime | None = None) -> list[Availability]:
        del identity  # any authenticated caller
        after = to_utc_naive(after) if after is not None else self.clock()

        return self.db.query(Availability).options(
            joinedload(Availability.professor),
        ).filter(
            Availability.professor_id == professor_id,
            Availability.is_booked.is_(False),
            Availability.start_time > after,
        ).order_by(Availability.start_time.asc()).all()

    def list_own(self, identity: Identity) -> list[Availability]:
        require_role(identity, PROFESSOR_ROLE)

        return self.db.query(Availability).options(
            joinedload(Availability.booked_by),
        ).filter(
            Availability.professor_id == identity.user_id,
        ).order_by(Availability.start_time.asc()).all()

    def delete_window(self, identity: Identity, window_id: int) -> None:
        require_role(identity, PROFESSOR_ROLE)

        with unit_of_work(self.db):
            window = self.db.query(Availability).filter(
                Availability.id == window_id,
                Availability.professor_id == identity.user_id,
            ).first()

            if window is None:
                raise NotFoundError('Availability slot not found.')

            if window.is_booked:
                raise WindowBookedError()

            # Cancelled appointments outlive the window they were booked from.
            self.db.execute(
                update(Appointment)
                .where(Appointment.availability_id == window.id)
                .values(availability_id=None)
                .execution_options(synchronize_session=False)
            )
            deleted = self.db.query(Availability).filter(
                Availability.id == window.id,
                Availability.is_booked.is_(False),
            ).delete(synchronize_session=False)

            if deleted == 0:
                # Booked between the read and the delete.
                raise WindowBookedError()

        self.db.expunge(window)
        logger.info('Professor %s deleted window %s', identity.user_id, window_id)
