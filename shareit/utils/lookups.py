"""Resolve user and item ids to entities, or fail with a typed not-found error."""

import logging
from typing import Protocol

from fastapi import Depends
from sqlalchemy.orm import Session

from shareit.db import get_db
from shareit.models.item import Item
from shareit.models.user import User
from shareit.utils.exceptions import ItemNotFound, UserNotFound

logger = logging.getLogger(__name__)


class UserLookup(Protocol):
    def get(self, user_id: int) -> User:
        ...


class ItemLookup(Protocol):
    def get(self, item_id: int) -> Item:
        ...


class DbUserLookup:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            logger.error(f"User not found: {user_id}")
            raise UserNotFound(user_id)
        return user


class DbItemLookup:
    def __init__(self, db: Session):
        self.db = db

    def get(self, item_id: int) -> Item:
        item = self.db.get(Item, item_id)
        if item is None:
            logger.error(f"Item not found: {item_id}")
            raise ItemNotFound(item_id)
        return item


def get_user_lookup(db: Session = Depends(get_db)) -> UserLookup:
    return DbUserLookup(db)


def get_item_lookup(db: Session = Depends(get_db)) -> ItemLookup:
    return DbItemLookup(db)
