"""Bearer-token role checks for admin endpoints.

Tokens are HS256 JWTs signed with JWT_SECRET. Roles come from a ``roles``
list claim or a single ``role`` claim; "ADMIN" grants admin access.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt
from jose.exceptions import JWTError

from subscription_catalog.config import Settings, settings

logger = logging.getLogger(__name__)

ADMIN_ROLE = "ADMIN"

bearer_scheme = HTTPBearer(auto_error=False)


def settings_for(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or settings


def create_access_token(
    subject: str,
    roles: list[str],
    secret: str | None = None,
    expires_in: timedelta = timedelta(hours=12),
    algorithm: str | None = None,
) -> str:
    """Mint a signed token for ``subject`` carrying ``roles``."""
    secret = secret or settings.jwt_secret
    if not secret:
        raise ValueError("JWT_SECRET is not set")
    payload = {
        "sub": subject,
        "roles": roles,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(payload, secret, algorithm=algorithm or settings.jwt_algorithm)


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> dict[str, Any] | None:
    """Verify and decode a token.

    Returns:
        The claims, or None if the token is invalid or expired
    """
    try:
        return jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError:
        return None


def roles_of(claims: dict[str, Any]) -> set[str]:
    roles = claims.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]
    if claims.get("role"):
        roles = [*roles, claims["role"]]
    return {str(role).upper().removeprefix("ROLE_") for role in roles}


def get_current_claims(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> dict[str, Any]:
    """Dependency returning the verified claims of the bearer token.

    Raises:
        HTTPException: 401 if the token is missing or invalid
    """
    config = settings_for(request)
    if not config.jwt_secret:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="JWT_SECRET is not set")

    token = (credentials.credentials if credentials else "").strip()
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    claims = decode_token(token, config.jwt_secret, config.jwt_algorithm)
    if not claims or not claims.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims


def require_admin(claims: Annotated[dict[str, Any], Depends(get_current_claims)]) -> dict[str, Any]:
    """Dependency admitting only callers with the ADMIN role.

    Raises:
        HTTPException: 403 if the caller is not an admin
    """
    if ADMIN_ROLE not in roles_of(claims):
        logger.warning("Admin access denied for: %s", claims.get("sub"))
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return claims


def require_writer(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> dict[str, Any] | None:
    """Dependency for the public-path write endpoints.

    Open to everyone when ALLOW_PUBLIC_WRITES is set, admin-only otherwise.
    """
    if settings_for(request).allow_public_writes:
        return None
    return require_admin(get_current_claims(request, credentials))


AdminDep = Annotated[dict[str, Any], Depends(require_admin)]
WriterDep = Annotated[dict[str, Any] | None, Depends(require_writer)]
