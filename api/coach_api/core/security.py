"""
Auth gate: verifies the auth provider's access token and resolves the learner profile.

Every route depends on `get_current_profile`; routes that receive a client-supplied
user id additionally call `ensure_owner`.
"""
import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlmodel import Session, select

from coach_api.core.config import settings
from coach_api.core.database import get_session
from coach_api.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError
from coach_api.models import User

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> str:
    """
    Validate an access token and return its subject (the auth provider's user id).

    Raises:
        AuthenticationError: If the token is malformed, expired, badly signed,
            or carries no subject
    """
    if not settings.supabase_jwt_secret:
        logger.error("SUPABASE_JWT_SECRET is not configured; rejecting token")
        raise AuthenticationError("Unauthorized")
    try:
        payload = jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=[settings.supabase_jwt_algorithm],
            audience=settings.supabase_jwt_audience,
        )
    except JWTError as e:
        logger.warning(f"Rejected access token: {str(e)}")
        raise AuthenticationError("Unauthorized") from e

    subject: Optional[str] = payload.get("sub")
    if not subject:
        raise AuthenticationError("Unauthorized")
    return subject


def get_auth_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Dependency returning the authenticated auth-provider user id."""
    token = credentials.credentials if credentials else request.cookies.get(settings.auth_cookie_name)
    if not token:
        raise AuthenticationError("Unauthorized")
    return decode_access_token(token)


def get_current_profile(
    auth_user_id: str = Depends(get_auth_user_id),
    session: Session = Depends(get_session),
) -> User:
    """Dependency returning the `users` row of the authenticated caller."""
    profile = session.exec(select(User).where(User.auth_user_id == auth_user_id)).first()
    if not profile:
        raise NotFoundError("User profile not found")
    return profile


def ensure_owner(profile: User, user_id: int) -> None:
    """Reject requests that act on behalf of another user."""
    if profile.id != user_id:
        logger.warning(f"User {profile.id} attempted to act as user {user_id}")
        raise AuthorizationError("User profile not found or unauthorized")
