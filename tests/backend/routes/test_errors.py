import pytest

from backend.core.exceptions import (
    AlreadyBookedError,
    ForbiddenError,
    InvalidRangeError,
    NotFoundError,
    OverlapConflictError,
    PastSlotError,
    SchedulingError,
    StoreUnavailableError,
    UnauthenticatedError,
    WindowBookedError,
)
from backend.routes.errors import status_code_for


@pytest.mark.parametrize(
    ('error', 'status_code'),
    [
        (InvalidRangeError(), 400),
        (PastSlotError(), 400),
        (UnauthenticatedError(), 401),
        (ForbiddenError(), 403),
        (NotFoundError(), 404),
        (OverlapConflictError(), 409),
        (AlreadyBookedError(), 409),
        (WindowBookedError(), 409),
        (StoreUnavailableError(), 503),
        (SchedulingError(), 500),
    ],
)
def test_status_code_for_maps_error_kinds(error: SchedulingError, status_code: int) -> None:
    assert status_code_for(error) == status_code


def test_scheduling_error_uses_default_message() -> None:
    error = NotFoundError()

    assert error.message == 'Resource not found.'
    assert str(error) == 'Resource not found.'
    assert NotFoundError('Appointment not found.').message == 'Appointment not found.'
