class SchedulingError(Exception):
    """Base exception for every failure reported by the scheduling core."""

    kind = "scheduling_error"
    default_message = "Scheduling request failed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRangeError(SchedulingError):
    kind = "invalid_range"
    default_message = "End time must be after start time."


class OverlapConflictError(SchedulingError):
    kind = "overlap_conflict"
    default_message = "Time slot overlaps with existing availability."


class NotFoundError(SchedulingError):
    kind = "not_found"
    default_message = "Resource not found."


class AlreadyBookedError(SchedulingError):
    kind = "already_booked"
    default_message = "This time slot is already booked."


class PastSlotError(SchedulingError):
    kind = "past_slot"
    default_message = "Cannot book past time slots."


class WindowBookedError(SchedulingError):
    kind = "window_booked"
    default_message = "Cannot delete booked availability slot."


class ForbiddenError(SchedulingError):
    kind = "forbidden"
    default_message = "You do not have permission to perform this action."


class UnauthenticatedError(SchedulingError):
    kind = "unauthenticated"
    default_message = "Not authenticated."


class StoreUnavailableError(SchedulingError):
    """Raised when the database cannot complete a unit of work."""

    kind = "store_unavailable"
    default_message = "Database unavailable. Verify DATABASE_URL and database credentials."


class UserExistsError(SchedulingError):
    kind = "user_exists"
    default_message = "User already exists."


class ValidationFailedError(SchedulingError):
    kind = "validation_failed"
    default_message = "Please provide all required fields."
