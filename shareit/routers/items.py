from datetime import datetime
from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_, select
from sqlalchemy.orm import Session
from shareit.config import settings
from shareit.db import get_db
from shareit.models.booking import Booking
from shareit.models.comment import Comment
from shareit.models.item import Item
from shareit.schemas.item import (
    BookingForItem,
    CommentCreate,
    CommentResponse,
    ItemCreate,
    ItemResponse,
    ItemUpdate,
)
from shareit.utils.auth import get_current_user_id
from shareit.utils.exceptions import CommentNotAllowed
from shareit.utils.lookups import ItemLookup, UserLookup, get_item_lookup, get_user_lookup
from shareit.utils.projections import (
    has_completed_booking,
    last_booking_for,
    last_bookings_for,
    next_booking_for,
    next_bookings_for,
)
from shareit.utils.validation_helpers import ensure_item_owner
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/items",
    tags=["items"],
)


def comment_to_response(comment: Comment) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        text=comment.text,
        author_name=comment.author.name,
        created=comment.created,
    )


def item_to_response(
    item: Item,
    last: Optional[Booking] = None,
    next_: Optional[Booking] = None,
) -> ItemResponse:
    return ItemResponse(
        id=item.id,
        name=item.name,
        description=item.description,
        available=item.available,
        owner_id=item.owner_id,
        comments=[comment_to_response(c) for c in item.comments],
        last_booking=BookingForItem.model_validate(last) if last else None,
        next_booking=BookingForItem.model_validate(next_) if next_ else None,
    )


@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
def create_item(
    item: ItemCreate,
    db: Session = Depends(get_db),
    users: UserLookup = Depends(get_user_lookup),
    user_id: int = Depends(get_current_user_id),
):
    """
    List a new item for rent.
    The caller becomes its owner.
    """
    owner = users.get(user_id)
    db_item = Item(**item.model_dump(), owner=owner)
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    logger.debug(f"Created item {db_item.id} for owner {user_id}")
    return item_to_response(db_item)


@router.patch("/{item_id}", response_model=ItemResponse)
def update_item(
    item_id: int,
    item_update: ItemUpdate,
    db: Session = Depends(get_db),
    items: ItemLookup = Depends(get_item_lookup),
    user_id: int = Depends(get_current_user_id),
):
    """
    Update an item's name, description or availability.
    Only the owner may update an item.
    """
    db_item = items.get(item_id)
    ensure_item_owner(db_item, user_id)

    update_data = item_update.model_dump(exclude_unset=True, exclude_none=True)
    for key, value in update_data.items():
        setattr(db_item, key, value)
    db.commit()
    db.refresh(db_item)
    logger.debug(f"Updated item {item_id}: {update_data}")
    return item_to_response(db_item)


@router.get("/search", response_model=List[ItemResponse])
def search_items(
    text: str = Query(""),
    from_: int = Query(0, alias="from", ge=0),
    size: int = Query(settings.default_page_size, gt=0),
    db: Session = Depends(get_db),
):
    """
    Search available items by name or description.

    - **text**: Case-insensitive substring. Blank text matches nothing.
    """
    text = text.strip()
    if not text:
        return []

    pattern = f"%{text}%"
    found = db.execute(
        select(Item)
        .where(Item.available.is_(True))
        .where(or_(Item.name.ilike(pattern), Item.description.ilike(pattern)))
        .order_by(Item.id)
        .offset(from_)
        .limit(size)
    ).scalars().all()
    logger.debug(f"Search '{text}' matched {len(found)} items")
    return [item_to_response(item) for item in found]


@router.get("/{item_id}", response_model=ItemResponse)
def get_item(
    item_id: int,
    db: Session = Depends(get_db),
    items: ItemLookup = Depends(get_item_lookup),
    user_id: int = Depends(get_current_user_id),
):
    """
    Retrieve an item with its comments.
    The owner also sees the last and next approved bookings.
    """
    item = items.get(item_id)
    if item.owner_id != user_id:
        return item_to_response(item)

    now = datetime.now()
    return item_to_response(
        item,
        last_booking_for(db, item_id, now),
        next_booking_for(db, item_id, now),
    )


@router.get("", response_model=List[ItemResponse])
def get_owner_items(
    from_: int = Query(0, alias="from", ge=0),
    size: int = Query(settings.default_page_size, gt=0),
    db: Session = Depends(get_db),
    users: UserLookup = Depends(get_user_lookup),
    user_id: int = Depends(get_current_user_id),
):
    """
    Retrieve the caller's items with their last and next approved bookings.
    """
    users.get(user_id)
    owned = db.execute(
        select(Item).where(Item.owner_id == user_id).order_by(Item.id).offset(from_).limit(size)
    ).scalars().all()

    item_ids = [item.id for item in owned]
    now = datetime.now()
    last: Dict[int, Booking] = last_bookings_for(db, item_ids, now)
    upcoming: Dict[int, Booking] = next_bookings_for(db, item_ids, now)
    logger.debug(f"Retrieved {len(owned)} items of owner {user_id}")
    return [item_to_response(item, last.get(item.id), upcoming.get(item.id)) for item in owned]


@router.post("/{item_id}/comment", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def add_comment(
    item_id: int,
    comment: CommentCreate,
    db: Session = Depends(get_db),
    users: UserLookup = Depends(get_user_lookup),
    items: ItemLookup = Depends(get_item_lookup),
    user_id: int = Depends(get_current_user_id),
):
    """
    Comment on an item.
    Allowed only after an approved rental of the item by the caller has ended.
    """
    author = users.get(user_id)
    item = items.get(item_id)
    now = datetime.now()
    if not has_completed_booking(db, user_id, item_id, now):
        logger.error(f"User {user_id} has no completed booking of item {item_id}")
        raise CommentNotAllowed("User has not rented this item or the rental is not over yet")

    db_comment = Comment(text=comment.text, item=item, author=author, created=now)
    db.add(db_comment)
    db.commit()
    db.refresh(db_comment)
    logger.debug(f"User {user_id} commented on item {item_id}")
    return comment_to_response(db_comment)
