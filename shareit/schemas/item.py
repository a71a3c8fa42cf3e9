from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    available: bool


class ItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    available: Optional[bool] = None


class ItemShort(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    available: bool

    model_config = ConfigDict(from_attributes=True)


class BookingForItem(BaseModel):
    """Booking summary shown as lastBooking / nextBooking of an item."""

    id: int
    booker_id: int = Field(serialization_alias="bookerId")
    start: datetime
    end: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentCreate(BaseModel):
    text: str = Field(..., min_length=1)


class CommentResponse(BaseModel):
    id: int
    text: str
    author_name: str = Field(serialization_alias="authorName")
    created: datetime


class ItemResponse(ItemShort):
    owner_id: int = Field(serialization_alias="ownerId")
    comments: List[CommentResponse] = []
    last_booking: Optional[BookingForItem] = Field(None, serialization_alias="lastBooking")
    next_booking: Optional[BookingForItem] = Field(None, serialization_alias="nextBooking")
