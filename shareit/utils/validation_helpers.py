import logging
from datetime import datetime

from shareit.models.booking import Booking
from shareit.models.item import Item
from shareit.utils.exceptions import NotAuthorized, NotOwner, SelfBooking, UnavailableItem

logger = logging.getLogger(__name__)


def to_naive_local(value):
    """Normalize a datetime to naive local time, the form stored in the database."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def validate_booking_window(start: datetime, end: datetime) -> None:
    """Raise ValueError unless start is not in the past and strictly precedes end."""
    if start < datetime.now().replace(microsecond=0):
        raise ValueError("Booking start must be in the present or future")
    if end <= start:
        raise ValueError("Booking end must be after booking start")


def validate_booking_creation(item: Item, booker_id: int) -> None:
    """Check that the item can be booked by the given user."""
    if not item.available:
        logger.error(f"Item {item.id} is not available")
        raise UnavailableItem(item.id)
    if item.owner_id == booker_id:
        logger.error(f"User {booker_id} tried to book own item {item.id}")
        raise SelfBooking()


def ensure_item_owner(item: Item, user_id: int, action: str = "manage this item") -> None:
    if item.owner_id != user_id:
        logger.error(f"User {user_id} is not the owner of item {item.id}")
        raise NotOwner(f"Only the item owner can {action}")


def authorize_view(booking: Booking, requester_id: int) -> None:
    """Allow only the booker or the item owner to see a booking."""
    if requester_id not in (booking.booker_id, booking.item.owner_id):
        logger.error(f"User {requester_id} not authorized to view booking {booking.id}")
        raise NotAuthorized("Booking is available only to its booker or the item owner")
