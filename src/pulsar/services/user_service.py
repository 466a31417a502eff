"""CRUD-style helpers for managing users."""
from __future__ import annotations

import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from pulsar.core import security
from pulsar.core.errors import (
    EMAIL_TAKEN_MESSAGE,
    USERNAME_TAKEN_MESSAGE,
    AuthenticationError,
    ConflictError,
    NotFoundError,
)
from pulsar.models.user import User
from pulsar.schemas.user import ProfileUpdateRequest, RegisterRequest

logger = logging.getLogger(__name__)

INVALID_LOGIN_MESSAGE = "Invalid email/username or password"

__all__ = [
    "get_user",
    "get_user_or_404",
    "get_user_by_username_or_404",
    "create_user",
    "authenticate",
    "update_profile",
]


def get_user(db: Session, user_id: int) -> User | None:
    """Return a single user by primary key."""
    return db.get(User, user_id)


def get_user_or_404(db: Session, user_id: int) -> User:
    """Return a user by primary key or raise `NotFoundError`."""
    user = get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def get_user_by_username_or_404(db: Session, username: str) -> User:
    """Return a user by handle (case-insensitive) or raise `NotFoundError`."""
    user = db.query(User).filter(User.username == username.lower()).first()
    if user is None:
        raise NotFoundError("User not found")
    return user


def create_user(db: Session, payload: RegisterRequest) -> User:
    """Persist a new user with a hashed password.

    Raises:
        ConflictError: If the email or username is already registered.
    """
    if db.query(User).filter(User.email == payload.email).first() is not None:
        raise ConflictError(EMAIL_TAKEN_MESSAGE)
    if db.query(User).filter(User.username == payload.username).first() is not None:
        raise ConflictError(USERNAME_TAKEN_MESSAGE)

    user = User(
        email=payload.email,
        username=payload.username,
        display_name=payload.display_name,
        password_hash=security.hash_password(payload.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s (%s)", user.id, user.username)
    return user


def authenticate(db: Session, email_or_username: str, password: str) -> User:
    """Return the user matching the identifier and password.

    Raises:
        AuthenticationError: If no user matches or the password is wrong. The
            message does not reveal which.
    """
    identifier = email_or_username.strip().lower()
    user = (
        db.query(User)
        .filter(or_(User.email == identifier, User.username == identifier))
        .first()
    )
    if user is None or not security.verify_password(password, user.password_hash):
        raise AuthenticationError(INVALID_LOGIN_MESSAGE)
    return user


def update_profile(db: Session, user: User, update_data: ProfileUpdateRequest) -> User:
    """Apply partial profile updates to `user`."""
    update_dict = update_data.model_dump(exclude_unset=True, exclude_none=True)
    for key, value in update_dict.items():
        setattr(user, key, value)

    db.add(user)
    db.commit()
    db.refresh(user)
    return user
