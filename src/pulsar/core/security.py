"""Password hashing and access-token helpers."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from pulsar.core.errors import AuthenticationError
from pulsar.core.settings import settings

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """Return a salted hash of `password`."""
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check `password` against a stored hash; unknown hash formats never match."""
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        return False


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Create a signed JWT whose subject is the user id."""
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode: dict[str, object] = {"sub": str(user_id), "exp": expire}
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> int:
    """Return the user id encoded in `token`.

    Raises:
        AuthenticationError: If the token is malformed, expired, or carries
            no usable subject.
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        raise AuthenticationError() from err

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError) as err:
        raise AuthenticationError() from err
