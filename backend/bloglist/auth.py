"""Authentication helpers and FastAPI security dependencies.

This module provides `decode_token`, the `AuthorizationGuard` that turns
an `Authorization` header into the live `User` it names, and the FastAPI
dependencies `get_current_user` / `get_optional_user` built on it.

Every failure raises `errors.Unauthorized`; the application's exception
handler turns it into a 401 response before any side effect happens.
"""

import logging
from typing import Optional
from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt
from sqlmodel import Session
from .config import TokenConfig, settings
from .database import get_session
from .errors import Unauthorized
from . import models, repositories

logger = logging.getLogger("bloglist.auth")

# declares the scheme in OpenAPI; the guard parses the raw header itself
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_config() -> TokenConfig:
    """Dependency returning the signing configuration for this process."""
    return settings.token_config


def decode_token(token: str, token_config: TokenConfig) -> dict:
    """Decode and verify a JWT token.

    Returns the decoded payload on success or raises `Unauthorized`.
    """
    try:
        return jwt.decode(token, token_config.secret, algorithms=[token_config.algorithm])
    except jwt.ExpiredSignatureError:
        raise Unauthorized('token expired')
    except jwt.InvalidTokenError as e:
        logger.debug("rejected token: %s", e)
        raise Unauthorized('invalid token')


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token part of a `Bearer <token>` header value."""
    if not authorization:
        raise Unauthorized('token missing')
    scheme, _, token = authorization.strip().partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        raise Unauthorized('authorization header must use the Bearer scheme')
    return token.strip()


class AuthorizationGuard:
    """Resolve bearer tokens to users."""
    def __init__(self, session: Session, token_config: TokenConfig):
        self.user_repo = repositories.UserRepository(session)
        self.token_config = token_config

    def authenticate(self, authorization: Optional[str]) -> models.User:
        """Validate the header value and return the user it identifies.

        The user is looked up on every call, so a token belonging to a
        deleted account is rejected even before it expires.
        """
        payload = decode_token(extract_bearer_token(authorization), self.token_config)
        user_id = payload.get('user_id')
        if isinstance(user_id, bool) or not isinstance(user_id, int) or not 1 <= user_id <= models.SQL_INT_MAX:
            raise Unauthorized('invalid token payload')
        user = self.user_repo.get(user_id)
        if not user:
            raise Unauthorized('user not found')
        return user


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    db: Session = Depends(get_session),
    token_config: TokenConfig = Depends(get_token_config),
) -> models.User:
    """FastAPI dependency that returns the authenticated user or raises 401."""
    return AuthorizationGuard(db, token_config).authenticate(request.headers.get('Authorization'))


def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    db: Session = Depends(get_session),
    token_config: TokenConfig = Depends(get_token_config),
) -> Optional[models.User]:
    """Like `get_current_user`, but a request without a header yields `None`.

    A header that is present but invalid is still rejected.
    """
    authorization = request.headers.get('Authorization')
    if authorization is None:
        return None
    return AuthorizationGuard(db, token_config).authenticate(authorization)
