"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from pulsar.core.errors import AuthenticationError
from pulsar.core.security import decode_access_token
from pulsar.db.session import get_db
from pulsar.models import User

# HTTP Bearer scheme for JWT authentication. auto_error is off so that a
# missing header and a bad token produce the same 401.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def get_current_user(credentials: CredentialsDep, db: SessionDep) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials, if any were sent
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        AuthenticationError: If the token is missing or invalid, or names an
            unknown user
    """
    if credentials is None:
        raise AuthenticationError()
    user_id = decode_access_token(credentials.credentials)
    user = db.get(User, user_id)
    if user is None:
        raise AuthenticationError()
    return user


def get_optional_user(credentials: CredentialsDep, db: SessionDep) -> User | None:
    """Resolve the viewer on endpoints that work anonymously.

    A missing or unusable token yields None instead of an error.
    """
    if credentials is None:
        return None
    try:
        return get_current_user(credentials, db)
    except AuthenticationError:
        return None


# Type aliases for current user dependencies
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
