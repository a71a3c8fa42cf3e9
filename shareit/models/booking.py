import enum
from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer
from sqlalchemy.orm import relationship
from shareit.db import Base


class BookingStatus(str, enum.Enum):
    """Persisted booking status.

    A booking starts as WAITING and is decided exactly once by the item owner.
    CANCELED has no producing transition; no cancel operation is exposed.
    """

    WAITING = "WAITING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELED = "CANCELED"


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    start = Column("start_date", DateTime, nullable=False, index=True)
    end = Column("end_date", DateTime, nullable=False)
    item_id = Column(Integer, ForeignKey("items.id"), nullable=False, index=True)
    booker_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(
        Enum(BookingStatus, name="booking_status"),
        nullable=False,
        default=BookingStatus.WAITING,
    )

    item = relationship("Item", back_populates="bookings")
    booker = relationship("User", back_populates="bookings")
