from datetime import datetime

from pydantic import BaseModel


class UserSummaryResponse(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class WindowResponse(BaseModel):
    id: int
    professor_id: int
    start_time: datetime
    end_time: datetime
    is_booked: bool
    booked_by_id: int | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class PublicWindowResponse(WindowResponse):
    professor: UserSummaryResponse | None = None


class OwnWindowResponse(WindowResponse):
    booked_by: UserSummaryResponse | None = None


class AppointmentResponse(BaseModel):
    id: int
    student_id: int
    professor_id: int
    availability_id: int | None = None
    appointment_time: datetime
    status: str
    cancelled_by_id: int | None = None
    cancellation_reason: str | None = None
    created_at: datetime | None = None
    student: UserSummaryResponse | None = None
    professor: UserSummaryResponse | None = None
    availability: WindowResponse | None = None

    class Config:
        from_attributes = True
