"""
Authentication dependencies for FastAPI
Provides JWT bearer token validation and user extraction
"""

import asyncio
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2AuthorizationCodeBearer

from blueprint.core.config import config
from blueprint.core.logger import logger
from blueprint.models.user import User

oauth2_scheme = OAuth2AuthorizationCodeBearer(
    authorizationUrl=config.authorization_url,
    tokenUrl=config.token_url,
    scopes={config.auth_api_scope: "Access to the blueprint API"},
    auto_error=False,
)

_jwks_client: Optional[jwt.PyJWKClient] = None


class AuthError(Exception):
    """Custom authentication error"""
    def __init__(self, message: str, status_code: int = 401):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def get_jwks_client() -> jwt.PyJWKClient:
    """JWKS client for the configured authority, created once"""
    global _jwks_client
    if _jwks_client is None:
        _jwks_client = jwt.PyJWKClient(config.jwks_url, cache_keys=True)
    return _jwks_client


async def _signing_key(token: str):
    if config.jwt_secret:
        return config.jwt_secret, config.jwt_algorithm

    # PyJWKClient does blocking HTTP
    signing_key = await asyncio.to_thread(get_jwks_client().get_signing_key_from_jwt, token)
    return signing_key.key, "RS256"


async def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded token payload

    Raises:
        AuthError: If token is invalid or expired
    """
    try:
        key, algorithm = await _signing_key(token)
        options = {"verify_aud": bool(config.auth_audience)}
        return jwt.decode(
            token,
            key,
            algorithms=[algorithm],
            audience=config.auth_audience or None,
            options=options,
        )
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired", status.HTTP_401_UNAUTHORIZED)
    except jwt.PyJWTError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise AuthError("Invalid token", status.HTTP_401_UNAUTHORIZED)


def _roles(payload: dict) -> list:
    roles = payload.get("roles")
    if roles is None:
        roles = payload.get("realm_access", {}).get("roles", [])
    return list(roles) if isinstance(roles, (list, tuple)) else [roles]


async def get_current_user(token: Optional[str] = Depends(oauth2_scheme)) -> User:
    """
    Dependency to extract and validate current user from the bearer token.
    Raises 401 if authentication fails.
    """
    if not token:
        logger.warning("Authentication required: No token provided")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = await decode_jwt(token)
    except AuthError as e:
        logger.warning(f"Authentication failed: {e.message}")
        raise HTTPException(
            status_code=e.status_code,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("Invalid token: Missing subject")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: Missing user identifier",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = User(id=str(user_id), email=payload.get("email"), roles=_roles(payload))
    logger.debug(f"Authentication successful for user: {user_id}")
    return user


async def require_user_email(user: User = Depends(get_current_user)) -> User:
    """Writes are attributed to the caller's email; tokens without one are rejected"""
    if not user.email:
        logger.warning("Authenticated user has no email claim", metadata={"user_id": user.id})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is missing the email claim",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
