# stockroom/core/auth.py
import uuid
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from stockroom.core.config import get_settings
from stockroom.database import get_session
from stockroom.models.user import User
from stockroom.repositories.user_repo import UserRepository

settings = get_settings()

# auto_error=False so a missing header is reported as 401 by require_auth
# rather than 403 by the security scheme.
bearer_scheme = HTTPBearer(auto_error=False)

user_repo = UserRepository()


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify an access token (JWT).

    Verification:
      - signature (JWT_ALG using JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def _default_name_from_email(email: str) -> str:
    if "@" in email:
        return email.split("@", 1)[0]
    return email


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Resolve the current staff user from a bearer JWT.

    Flow:
      1. No Authorization header => None.
      2. Decode JWT => 'sub' (user id) and 'email'.
      3. Find the user row; auto-provision it with role "user" if missing.
    """
    if credentials is None:
        return None

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")
    email = payload.get("email")

    if not sub or not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub/email",
        )

    try:
        sub_uuid = uuid.UUID(sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid sub in token",
        )

    user = user_repo.get_by_id(session, sub_uuid)

    # Admins are promoted manually.
    if user is None:
        user = user_repo.create(
            session,
            User(
                id=sub_uuid,
                email=email,
                name=_default_name_from_email(email),
                role="user",
            ),
        )

    return user


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """
    Reject unauthenticated requests with 401.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


def require_admin(user: User = Depends(require_auth)) -> User:
    """
    Reject non-admin users with 403.

    Guards irreversible operations (permanent deletes) and user administration.
    """
    if user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user
