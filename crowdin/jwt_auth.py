"""
Crowdin JWT Authentication
Extracts and verifies the JWT Crowdin attaches to app requests
"""

import logging
from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Request

from config import Settings
from crowdin.errors import AuthenticationMissingError, InvalidTokenError

logger = logging.getLogger(__name__)

JWT_ALGORITHMS = ["HS256"]


@dataclass(frozen=True)
class CrowdinJwtPayload:
    """Subset of the Crowdin JWT claims used by the app."""
    domain: Optional[str]
    organization_id: int
    project_id: Optional[int]
    user_id: Optional[int]


def extract_token(request: Request) -> Optional[str]:
    """
    Read the JWT from the ``Authorization: Bearer`` header, falling back to
    the ``jwtToken`` query parameter.
    """
    auth_header = request.headers.get("authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header[len("Bearer "):].strip()
        if token:
            return token

    return request.query_params.get("jwtToken") or None


def require_token(request: Request) -> str:
    token = extract_token(request)
    if not token:
        raise AuthenticationMissingError("JWT token required")
    return token


def decode_crowdin_jwt(token: str, settings: Settings) -> CrowdinJwtPayload:
    """
    Verify a Crowdin JWT signed with the app's client secret.

    Raises:
        InvalidTokenError: Signature, audience or expiry check failed
    """
    try:
        claims = jwt.decode(
            token,
            settings.CROWDIN_CLIENT_SECRET,
            algorithms=JWT_ALGORITHMS,
            audience=settings.CROWDIN_CLIENT_ID,
        )
    except jwt.PyJWTError as e:
        logger.warning(f"[Auth] Rejected JWT: {e}")
        raise InvalidTokenError("Invalid JWT token", cause=e)

    context = claims.get("context") or {}
    organization_id = context.get("organization_id")
    if organization_id is None:
        raise InvalidTokenError("JWT token has no organization context")

    try:
        return CrowdinJwtPayload(
            domain=claims.get("domain") or None,
            organization_id=int(organization_id),
            project_id=_optional_int(context.get("project_id")),
            user_id=_optional_int(context.get("user_id")),
        )
    except (TypeError, ValueError) as e:
        raise InvalidTokenError("Invalid JWT token context", cause=e)


def _optional_int(value) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)
