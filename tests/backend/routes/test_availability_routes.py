from datetime import datetime

import pytest
from pydantic import ValidationError

from backend.core.exceptions import ForbiddenError, InvalidRangeError, OverlapConflictError, WindowBookedError
from backend.routes.appointment_routes import book_appointment, BookAppointmentRequest
from backend.routes.availability_routes import (
    CreateWindowRequest,
    create_window,
    delete_window,
    list_available_windows,
    list_my_windows,
)


def test_create_window_request_accepts_camel_case_fields() -> None:
    request = CreateWindowRequest.model_validate(
        {'startTime': '2026-01-06T10:00:00', 'endTime': '2026-01-06T11:00:00'}
    )

    assert request.start_time == datetime(2026, 1, 6, 10, 0)
    assert request.end_time == datetime(2026, 1, 6, 11, 0)


def test_create_window_request_requires_both_times() -> None:
    with pytest.raises(ValidationError):
        CreateWindowRequest.model_validate({'start_time': '2026-01-06T10:00:00'})


def test_create_window_returns_free_window(db, clock, professor) -> None:
    response = create_window(
        CreateWindowRequest(start_time=datetime(2026, 1, 6, 10, 0), end_time=datetime(2026, 1, 6, 11, 0)),
        identity=professor,
        db=db,
        clock=clock,
    )

    assert response.professor_id == professor.user_id
    assert response.is_booked is False
    assert response.booked_by_id is None


def test_create_window_rejects_reversed_range(db, clock, professor) -> None:
    with pytest.raises(InvalidRangeError):
        create_window(
            CreateWindowRequest(start_time=datetime(2026, 1, 6, 11, 0), end_time=datetime(2026, 1, 6, 10, 0)),
            identity=professor,
            db=db,
            clock=clock,
        )


def test_create_window_rejects_overlapping_window(db, clock, professor) -> None:
    create_window(
        CreateWindowRequest(start_time=datetime(2026, 1, 6, 10, 0), end_time=datetime(2026, 1, 6, 11, 0)),
        identity=professor,
        db=db,
        clock=clock,
    )

    with pytest.raises(OverlapConflictError):
        create_window(
            CreateWindowRequest(start_time=datetime(2026, 1, 6, 10, 30), end_time=datetime(2026, 1, 6, 11, 30)),
            identity=professor,
            db=db,
            clock=clock,
        )


def test_create_window_rejects_students(db, clock, student) -> None:
    with pytest.raises(ForbiddenError):
        create_window(
            CreateWindowRequest(start_time=datetime(2026, 1, 6, 10, 0), end_time=datetime(2026, 1, 6, 11, 0)),
            identity=student,
            db=db,
            clock=clock,
        )


def test_list_available_windows_embeds_professor(db, clock, professor, student) -> None:
    create_window(
        CreateWindowRequest(start_time=datetime(2026, 1, 6, 10, 0), end_time=datetime(2026, 1, 6, 11, 0)),
        identity=professor,
        db=db,
        clock=clock,
    )

    windows = list_available_windows(professor.user_id, after=None, identity=student, db=db, clock=clock)

    assert len(windows) == 1
    assert windows[0].professor.name == 'Professor P1'
    assert windows[0].professor.email == 'professorp1@example.edu'


def test_list_my_windows_embeds_booker(db, clock, professor, student) -> None:
    window = create_window(
        CreateWindowRequest(start_time=datetime(2026, 1, 6, 10, 0), end_time=datetime(2026, 1, 6, 11, 0)),
        identity=professor,
        db=db,
        clock=clock,
    )
    book_appointment(BookAppointmentRequest(availability_id=window.id), identity=student, db=db, clock=clock)

    windows = list_my_windows(identity=professor, db=db, clock=clock)

    assert windows[0].is_booked is True
    assert windows[0].booked_by.name == 'Student A1'


def test_delete_window_returns_no_content(db, clock, professor) -> None:
    window = create_window(
        CreateWindowRequest(start_time=datetime(2026, 1, 6, 10, 0), end_time=datetime(2026, 1, 6, 11, 0)),
        identity=professor,
        db=db,
        clock=clock,
    )

    response = delete_window(window.id, identity=professor, db=db, clock=clock)

    assert response.status_code == 204
    assert list_my_windows(identity=professor, db=db, clock=clock) == []


def test_delete_window_rejects_booked_window(db, clock, professor, student) -> None:
    window = create_window(
        CreateWindowRequest(start_time=datetime(2026, 1, 6, 10, 0), end_time=datetime(2026, 1, 6, 11, 0)),
        identity=professor,
        db=db,
        clock=clock,
    )
    book_appointment(BookAppointmentRequest(availability_id=window.id), identity=student, db=db, clock=clock)

    with pytest.raises(WindowBookedError):
        delete_window(window.id, identity=professor, db=db, clock=clock)
