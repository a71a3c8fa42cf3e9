from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from shareit.models.booking import BookingStatus
from shareit.schemas.item import ItemShort
from shareit.schemas.user import UserResponse
from shareit.utils.validation_helpers import to_naive_local, validate_booking_window


class BookingCreate(BaseModel):
    item_id: int = Field(..., alias="itemId")
    start: datetime
    end: datetime

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("start", "end")
    @classmethod
    def normalize_timezone(cls, value):
        return to_naive_local(value)

    @model_validator(mode="after")
    def check_window(self):
        validate_booking_window(self.start, self.end)
        return self


class BookingResponse(BaseModel):
    id: int
    start: datetime
    end: datetime
    status: BookingStatus
    item: ItemShort
    booker: UserResponse

    model_config = ConfigDict(from_attributes=True)
