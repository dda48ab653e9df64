from fastapi import APIRouter, Body, Depends, status
from pydantic import AliasChoices, BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_identity
from backend.auth.identity import Identity
from backend.core.clock import Clock, get_clock
from backend.database import get_db
from backend.routes.schemas import AppointmentResponse
from backend.services.booking_engine import BookingEngine

router = APIRouter(tags=['appointments'])

MAX_CANCELLATION_REASON_LENGTH = 500


class BookAppointmentRequest(BaseModel):
    availability_id: int = Field(validation_alias=AliasChoices('availability_id', 'availabilityId'))


class CancelAppointmentRequest(BaseModel):
    reason: str | None = None

    @field_validator('reason')
    @classmethod
    def validate_reason(cls, value: str | None) -> str | None:
        if value is None:
            return None

        normalized = value.strip()
        if not normalized:
            return None

        if len(normalized) > MAX_CANCELLATION_REASON_LENGTH:
            raise ValueError(f'Reason must be {MAX_CANCELLATION_REASON_LENGTH} characters or fewer.')

        return normalized


@router.post('/book', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def book_appointment(
    data: BookAppointmentRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    appointment = BookingEngine(db, clock).book(identity, data.availability_id)
    return AppointmentResponse.model_validate(appointment)


@router.put('/{appointment_id}/cancel', response_model=AppointmentResponse)
def cancel_appointment(
    appointment_id: int,
    data: CancelAppointmentRequest | None = Body(default=None),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    reason = data.reason if data is not None else None
    appointment = BookingEngine(db, clock).cancel(identity, appointment_id, reason)
    return AppointmentResponse.model_validate(appointment)


@router.get('/my-appointments', response_model=list[AppointmentResponse])
def list_my_appointments(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    appointments = BookingEngine(db, clock).list_for_student(identity)
    return [AppointmentResponse.model_validate(appointment) for appointment in appointments]


@router.get('/professor-appointments', response_model=list[AppointmentResponse])
def list_professor_appointments(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    appointments = BookingEngine(db, clock).list_for_professor(identity)
    return [AppointmentResponse.model_validate(appointment) for appointment in appointments]
