from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from shareit.db import get_db
from shareit.models.user import User
from shareit.schemas.user import UserCreate, UserResponse, UserUpdate
from shareit.utils.exceptions import EmailAlreadyExists
from shareit.utils.lookups import UserLookup, get_user_lookup
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


def ensure_email_free(db: Session, email: str, user_id: Optional[int] = None) -> None:
    """Raise EmailAlreadyExists if another user already has this email (case-insensitive)."""
    existing = db.execute(
        select(User).where(func.lower(User.email) == email.strip().lower())
    ).scalar_one_or_none()
    if existing is not None and existing.id != user_id:
        logger.error(f"Email already registered: {email}")
        raise EmailAlreadyExists(email)


def commit_user(db: Session, user: User) -> User:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.error(f"Email already registered: {user.email}")
        raise EmailAlreadyExists(user.email)
    db.refresh(user)
    return user


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, db: Session = Depends(get_db)):
    """
    Register a new user.
    Email addresses are unique.
    """
    ensure_email_free(db, user.email)
    db_user = User(**user.model_dump())
    db.add(db_user)
    return commit_user(db, db_user)


@router.get("", response_model=List[UserResponse])
def get_users(db: Session = Depends(get_db)):
    """
    Retrieve all users ordered by id.
    """
    users = db.execute(select(User).order_by(User.id)).scalars().all()
    logger.debug(f"Retrieved {len(users)} users")
    return users


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, users: UserLookup = Depends(get_user_lookup)):
    return users.get(user_id)


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    users: UserLookup = Depends(get_user_lookup),
):
    """
    Update a user's name or email.

    - **name**: (Optional) New name.
    - **email**: (Optional) New email, which must not belong to another user.
    """
    db_user = users.get(user_id)
    update_data = user_update.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in update_data:
        ensure_email_free(db, update_data["email"], user_id)

    for key, value in update_data.items():
        setattr(db_user, key, value)
    commit_user(db, db_user)
    logger.debug(f"Updated user {user_id}: {update_data}")
    return db_user
