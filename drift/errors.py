# ABOUTME: Exceptions raised by the schedule pipeline; API routes map them to 502 responses.
# ABOUTME: ScheduleFormatError is a ValueError; catch it before ValueError where input errors map to 400.


class ModelBackendError(RuntimeError):
    """The language model backend failed or returned nothing usable."""


class ScheduleFormatError(ValueError):
    """Model output could not be repaired into any schedule row."""
