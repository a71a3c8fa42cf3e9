"""Typed failures raised by the booking engine and its collaborators.

Each exception carries its own HTTP status, so routers let them propagate and
FastAPI renders them as ``{"detail": message}``.
"""

from fastapi import HTTPException, status


class ShareItError(HTTPException):
    """Base class for every client-facing failure of the service."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=type(self).status_code, detail=detail)


class NotFoundError(ShareItError):
    status_code = status.HTTP_404_NOT_FOUND


class BookingNotFound(NotFoundError):
    def __init__(self, booking_id: int) -> None:
        super().__init__(f"Booking with id={booking_id} not found")


class ItemNotFound(NotFoundError):
    def __init__(self, item_id: int) -> None:
        super().__init__(f"Item with id={item_id} not found")


class UserNotFound(NotFoundError):
    def __init__(self, user_id: int) -> None:
        super().__init__(f"User with id={user_id} not found")


class AccessDenied(ShareItError):
    status_code = status.HTTP_403_FORBIDDEN


class NotOwner(AccessDenied):
    """The caller is not the owner of the item behind the booking or item."""


class NotAuthorized(AccessDenied):
    """The caller is neither the booker nor the item owner."""


class UnavailableItem(ShareItError):
    def __init__(self, item_id: int) -> None:
        super().__init__(f"Item with id={item_id} is not available for booking")


class SelfBooking(ShareItError):
    def __init__(self) -> None:
        super().__init__("Owner cannot book their own item")


class StatusAlreadySet(ShareItError):
    def __init__(self, booking_id: int) -> None:
        super().__init__(f"Status of booking {booking_id} is already set")


class CommentNotAllowed(ShareItError):
    pass


class EmailAlreadyExists(ShareItError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, email: str) -> None:
        super().__init__(f"User with email {email} already exists")
