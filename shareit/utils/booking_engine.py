"""Booking lifecycle: creation, the owner's decision, lookup and listings."""

import enum
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, select, update
from sqlalchemy.orm import Session, joinedload

from shareit.models.booking import Booking, BookingStatus
from shareit.models.item import Item
from shareit.utils.exceptions import BookingNotFound, StatusAlreadySet
from shareit.utils.lookups import ItemLookup, UserLookup
from shareit.utils.validation_helpers import (
    authorize_view,
    ensure_item_owner,
    validate_booking_creation,
)

logger = logging.getLogger(__name__)


class BookingState(str, enum.Enum):
    """Filter accepted by the booking listings. Never persisted."""

    ALL = "ALL"
    CURRENT = "CURRENT"
    PAST = "PAST"
    FUTURE = "FUTURE"
    WAITING = "WAITING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELED = "CANCELED"


def _with_relations(query):
    return query.options(
        joinedload(Booking.item).joinedload(Item.owner),
        joinedload(Booking.booker),
    )


def create_booking(
    db: Session,
    users: UserLookup,
    items: ItemLookup,
    booker_id: int,
    item_id: int,
    start: datetime,
    end: datetime,
) -> Booking:
    booker = users.get(booker_id)
    item = items.get(item_id)
    validate_booking_creation(item, booker_id)

    booking = Booking(
        start=start,
        end=end,
        item=item,
        booker=booker,
        status=BookingStatus.WAITING,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    logger.debug(f"Created booking {booking.id} for item {item_id} by user {booker_id}")
    return booking


def get_booking_or_404(db: Session, booking_id: int) -> Booking:
    booking = db.execute(
        _with_relations(select(Booking)).where(Booking.id == booking_id)
    ).scalar_one_or_none()
    if booking is None:
        logger.error(f"Booking not found: {booking_id}")
        raise BookingNotFound(booking_id)
    return booking


def decide_booking(db: Session, booking_id: int, requester_id: int, approved: bool) -> Booking:
    """Move a WAITING booking to APPROVED or REJECTED on behalf of the item owner.

    The transition is a single conditional UPDATE guarded by the WAITING status,
    so of two concurrent decisions exactly one wins and the other sees
    StatusAlreadySet.
    """
    booking = get_booking_or_404(db, booking_id)
    ensure_item_owner(booking.item, requester_id, action="approve or reject bookings")

    new_status = BookingStatus.APPROVED if approved else BookingStatus.REJECTED
    result = db.execute(
        update(Booking)
        .where(Booking.id == booking_id, Booking.status == BookingStatus.WAITING)
        .values(status=new_status)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        logger.error(f"Booking {booking_id} status already set")
        db.rollback()
        raise StatusAlreadySet(booking_id)

    db.commit()
    db.refresh(booking)
    logger.debug(f"Booking {booking_id} set to {new_status.value} by user {requester_id}")
    return booking


def find_booking(db: Session, booking_id: int, requester_id: int) -> Booking:
    booking = get_booking_or_404(db, booking_id)
    authorize_view(booking, requester_id)
    return booking


def state_condition(state: Optional[BookingState], now: datetime):
    """Translate a listing filter into a SQL condition, or None for no restriction."""
    match state:
        case None | BookingState.ALL:
            return None
        case BookingState.CURRENT:
            return and_(Booking.start <= now, Booking.end >= now)
        case BookingState.PAST:
            return Booking.end < now
        case BookingState.FUTURE:
            return Booking.start > now
        case (
            BookingState.WAITING
            | BookingState.APPROVED
            | BookingState.REJECTED
            | BookingState.CANCELED
        ):
            return Booking.status == BookingStatus(state.value)
        case _:
            raise ValueError(f"Unsupported booking state: {state}")


def _page(db: Session, subject_condition, state, offset: int, size: int) -> List[Booking]:
    query = _with_relations(select(Booking)).join(Booking.item).where(subject_condition)
    condition = state_condition(state, datetime.now())
    if condition is not None:
        query = query.where(condition)
    query = query.order_by(Booking.start.desc(), Booking.id.desc()).offset(offset).limit(size)
    return list(db.execute(query).scalars().unique().all())


def find_booker_bookings(
    db: Session,
    users: UserLookup,
    booker_id: int,
    state: Optional[BookingState] = None,
    offset: int = 0,
    size: int = 10,
) -> List[Booking]:
    """Bookings made by the user, most recent start first, `offset` rows skipped."""
    users.get(booker_id)
    bookings = _page(db, Booking.booker_id == booker_id, state, offset, size)
    logger.debug(f"Found {len(bookings)} bookings of booker {booker_id} (state={state})")
    return bookings


def find_owner_bookings(
    db: Session,
    users: UserLookup,
    owner_id: int,
    state: Optional[BookingState] = None,
    offset: int = 0,
    size: int = 10,
) -> List[Booking]:
    """Bookings of items owned by the user, most recent start first."""
    users.get(owner_id)
    bookings = _page(db, Item.owner_id == owner_id, state, offset, size)
    logger.debug(f"Found {len(bookings)} bookings for owner {owner_id} (state={state})")
    return bookings
