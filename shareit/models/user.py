from sqlalchemy.orm import relationship
from sqlalchemy import Column, Integer, String
from shareit.db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(512), unique=True, index=True, nullable=False)

    items = relationship("Item", back_populates="owner")
    bookings = relationship("Booking", back_populates="booker")
