"""Booking and cancellation of availability windows.

A window moves ``free -> booked -> free`` and an appointment moves
``scheduled -> cancelled``. Every flip is a conditional UPDATE keyed on the
state the caller observed, so of several concurrent requests exactly one
matches a row and the others get a row count of zero. The appointment write
and the window write of each transition share one transaction.
"""

import logging

from sqlalchemy import update
from sqlalchemy.orm import Session, joinedload

from backend.auth.identity import Identity, require_role
from backend.core import config
from backend.core.clock import Clock, utc_now
from backend.core.exceptions import AlreadyBookedError, NotFoundError, PastSlotError
from backend.database import unit_of_work
from backend.models.appointment import CANCELLED, SCHEDULED, Appointment
from backend.models.availability import Availability
from backend.models.user import PROFESSOR_ROLE, STUDENT_ROLE

logger = logging.getLogger(__name__)


class BookingEngine:
    def __init__(self, db: Session, clock: Clock = utc_now) -> None:
        self.db = db
        self.clock = clock

    def book(self, identity: Identity, window_id: int) -> Appointment:
        require_role(identity, STUDENT_ROLE)

        with unit_of_work(self.db):
            window = self.db.get(Availability, window_id)
            if window is None:
                raise NotFoundError('Availability slot not found.')

            if window.is_booked:
                raise AlreadyBookedError()

            if window.start_time <= self.clock():
                raise PastSlotError()

            if not self._claim_window(window, identity.user_id):
                logger.warning(
                    'Student %s lost the race for window %s (expected version %s)',
                    identity.user_id,
                    window_id,
                    window.version,
                )
                raise AlreadyBookedError()

            appointment = Appointment(
                student_id=identity.user_id,
                professor_id=window.professor_id,
                availability_id=window.id,
                appointment_time=window.start_time,
                status=SCHEDULED,
            )
            self.db.add(appointment)
            self.db.flush()

        self.db.refresh(window)
        self.db.refresh(appointment)
        logger.info('Student %s booked window %s as appointment %s', identity.user_id, window_id, appointment.id)
        return appointment

    def _claim_window(self, window: Availability, student_id: int) -> bool:
        result = self.db.execute(
            update(Availability)
            .where(
                Availability.id == window.id,
                Availability.is_booked.is_(False),
                Availability.version == window.version,
            )
            .values(
                is_booked=True,
                booked_by_id=student_id,
                version=Availability.version + 1,
                updated_at=self.clock(),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def cancel(self, identity: Identity, appointment_id: int, reason: str | None = None) -> Appointment:
        require_role(identity, PROFESSOR_ROLE)

        reason = (reason or '').strip() or config.DEFAULT_CANCELLATION_REASON

        with unit_of_work(self.db):
            cancelled = self.db.execute(
                update(Appointment)
                .where(
                    Appointment.id == appointment_id,
                    Appointment.professor_id == identity.user_id,
                    Appointment.status == SCHEDULED,
                )
                .values(
                    status=CANCELLED,
                    cancelled_by_id=identity.user_id,
                    cancellation_reason=reason,
                    updated_at=self.clock(),
                )
                .execution_options(synchronize_session=False)
            )
            if cancelled.rowcount != 1:
                raise NotFoundError('Appointment not found or already cancelled.')

            appointment = self.db.get(Appointment, appointment_id, populate_existing=True)

            released = self.db.execute(
                update(Availability)
                .where(
                    Availability.id == appointment.availability_id,
                    Availability.is_booked.is_(True),
                    Availability.booked_by_id == appointment.student_id,
                )
                .values(
                    is_booked=False,
                    booked_by_id=None,
                    version=Availability.version + 1,
                    updated_at=self.clock(),
                )
                .execution_options(synchronize_session=False)
            )
            if released.rowcount != 1:
                logger.warning(
                    'Appointment %s cancelled but window %s was not held by student %s',
                    appointment_id,
                    appointment.availability_id,
                    appointment.student_id,
                )

        self.db.refresh(appointment)
        if appointment.availability is not None:
            self.db.refresh(appointment.availability)
        logger.info('Professor %s cancelled appointment %s', identity.user_id, appointment_id)
        return appointment

    def list_for_student(self, identity: Identity) -> list[Appointment]:
        require_role(identity, STUDENT_ROLE)

        return self.db.query(Appointment).options(
            joinedload(Appointment.professor),
            joinedload(Appointment.availability),
        ).filter(
            Appointment.student_id == identity.user_id,
        ).order_by(Appointment.appointment_time.desc(), Appointment.id.desc()).all()

    def list_for_professor(self, identity: Identity) -> list[Appointment]:
        require_role(identity, PROFESSOR_ROLE)

        return self.db.query(Appointment).options(
            joinedload(Appointment.student),
            joinedload(Appointment.availability),
        ).filter(
            Appointment.professor_id == identity.user_id,
        ).order_by(Appointment.appointment_time.desc(), Appointment.id.desc()).all()
