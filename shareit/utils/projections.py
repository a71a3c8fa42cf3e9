"""Last/next APPROVED booking per item, as shown on the item detail view.

Last booking: the most recently concluded approved booking (end < now), latest
end first, highest id breaking ties. Next booking: the soonest upcoming
approved booking (start > now), earliest start first, lowest id breaking ties.
"""

from datetime import datetime
from typing import Dict, Iterable, Optional

from sqlalchemy import exists, select
from sqlalchemy.orm import Session

from shareit.models.booking import Booking, BookingStatus


def _last_query(now: datetime):
    return (
        select(Booking)
        .where(Booking.status == BookingStatus.APPROVED, Booking.end < now)
        .order_by(Booking.end.desc(), Booking.id.desc())
    )


def _next_query(now: datetime):
    return (
        select(Booking)
        .where(Booking.status == BookingStatus.APPROVED, Booking.start > now)
        .order_by(Booking.start.asc(), Booking.id.asc())
    )


def last_booking_for(db: Session, item_id: int, now: Optional[datetime] = None) -> Optional[Booking]:
    now = now or datetime.now()
    query = _last_query(now).where(Booking.item_id == item_id).limit(1)
    return db.execute(query).scalars().first()


def next_booking_for(db: Session, item_id: int, now: Optional[datetime] = None) -> Optional[Booking]:
    now = now or datetime.now()
    query = _next_query(now).where(Booking.item_id == item_id).limit(1)
    return db.execute(query).scalars().first()


def _first_per_item(db: Session, query, item_ids) -> Dict[int, Booking]:
    item_ids = set(item_ids)
    if not item_ids:
        return {}
    found: Dict[int, Booking] = {}
    for booking in db.execute(query.where(Booking.item_id.in_(item_ids))).scalars():
        # Rows arrive in preference order, so the first one per item wins
        found.setdefault(booking.item_id, booking)
    return found


def last_bookings_for(
    db: Session, item_ids: Iterable[int], now: Optional[datetime] = None
) -> Dict[int, Booking]:
    """Map each item id that has a concluded approved booking to its last one."""
    return _first_per_item(db, _last_query(now or datetime.now()), item_ids)


def next_bookings_for(
    db: Session, item_ids: Iterable[int], now: Optional[datetime] = None
) -> Dict[int, Booking]:
    """Map each item id that has an upcoming approved booking to its next one."""
    return _first_per_item(db, _next_query(now or datetime.now()), item_ids)


def has_completed_booking(
    db: Session, user_id: int, item_id: int, now: Optional[datetime] = None
) -> bool:
    """Whether the user has rented the item and the approved rental is over."""
    now = now or datetime.now()
    query = select(
        exists().where(
            Booking.booker_id == user_id,
            Booking.item_id == item_id,
            Booking.status == BookingStatus.APPROVED,
            Booking.end < now,
        )
    )
    return bool(db.execute(query).scalar())
