from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from shareit.config import settings
from shareit.db import get_db
from shareit.schemas.booking import BookingCreate, BookingResponse
from shareit.utils.auth import get_current_user_id
from shareit.utils.booking_engine import (
    BookingState,
    create_booking,
    decide_booking,
    find_booker_bookings,
    find_booking,
    find_owner_bookings,
)
from shareit.utils.lookups import ItemLookup, UserLookup, get_item_lookup, get_user_lookup
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
)


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
    description="Request an item for a time window. The booking starts in WAITING status.",
)
def create(
    booking: BookingCreate,
    db: Session = Depends(get_db),
    users: UserLookup = Depends(get_user_lookup),
    items: ItemLookup = Depends(get_item_lookup),
    user_id: int = Depends(get_current_user_id),
):
    """
    Create a booking request for an item.

    - **itemId**: ID of the item to book.
    - **start**: Start of the rental window (present or future).
    - **end**: End of the rental window (after start).

    Fails with 404 for an unknown user or item, and with 400 when the item is
    unavailable or belongs to the caller.
    """
    logger.debug(f"Creating booking for user: {user_id}, item_id: {booking.item_id}")
    return create_booking(db, users, items, user_id, booking.item_id, booking.start, booking.end)


@router.get(
    "",
    response_model=List[BookingResponse],
    summary="List the caller's bookings",
    description="Bookings made by the caller, most recent start first.",
)
def list_as_booker(
    state: BookingState = Query(BookingState.ALL),
    from_: int = Query(0, alias="from", ge=0),
    size: int = Query(settings.default_page_size, gt=0),
    db: Session = Depends(get_db),
    users: UserLookup = Depends(get_user_lookup),
    user_id: int = Depends(get_current_user_id),
):
    """
    - **state**: ALL, CURRENT, PAST, FUTURE, WAITING, APPROVED, REJECTED or CANCELED.
    - **from**: Number of bookings to skip.
    - **size**: Maximum number of bookings to return.
    """
    return find_booker_bookings(db, users, user_id, state, from_, size)


@router.get(
    "/owner",
    response_model=List[BookingResponse],
    summary="List bookings of the caller's items",
    description="Bookings for items owned by the caller, most recent start first.",
)
def list_as_owner(
    state: BookingState = Query(BookingState.ALL),
    from_: int = Query(0, alias="from", ge=0),
    size: int = Query(settings.default_page_size, gt=0),
    db: Session = Depends(get_db),
    users: UserLookup = Depends(get_user_lookup),
    user_id: int = Depends(get_current_user_id),
):
    return find_owner_bookings(db, users, user_id, state, from_, size)


@router.patch(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Approve or reject a booking",
    description="Decide a WAITING booking. Only the item owner may do this, and only once.",
)
def decide(
    booking_id: int,
    approved: bool,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    - **booking_id**: ID of the booking to decide.
    - **approved**: true to approve, false to reject.
    """
    logger.debug(f"User {user_id} deciding booking {booking_id}: approved={approved}")
    return decide_booking(db, booking_id, user_id, approved)


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get a booking by ID",
    description="Visible to the booker and to the owner of the booked item.",
)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return find_booking(db, booking_id, user_id)
