"""Exceptions raised when the editing state machines are misused"""


class BookingError(Exception):
    """Base exception for studiobook errors"""

    pass


class DraftStateError(BookingError):
    """Raised for an invalid operation on the project/event draft"""

    pass


class SectionStateError(BookingError):
    """Raised for an invalid operation on a section collection"""

    pass
