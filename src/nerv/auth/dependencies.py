"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers and routers to extract
and validate the caller's identity from the Authorization header.

Outcomes per request:
- no bearer token         → 401 (AuthRequired)
- token present, invalid  → 403 (AuthInvalid)
- token valid             → CurrentIdentity(user_id, email)

The rejection happens inside the dependency, so route handlers never run
for unauthenticated requests.
"""

from dataclasses import dataclass
from typing import Optional

import structlog
from fastapi import Depends, Header, Request

from nerv.auth.jwt import verify_token
from nerv.config import Settings
from nerv.errors import AuthInvalid, AuthRequired


@dataclass(frozen=True)
class CurrentIdentity:
    """The verified caller.

    Learn: This is the only identity downstream code sees. All store
    operations are scoped to user_id.
    """

    user_id: str
    email: str


def get_settings_dep(request: Request) -> Settings:
    """Settings of the running app (set by create_app)."""
    return request.app.state.settings


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from "Bearer <token>", or None if there is none."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


async def get_current_user(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings_dep),
) -> CurrentIdentity:
    """Extract current identity (required — 401 without a token, 403 if invalid)."""
    token = extract_bearer_token(authorization)
    if token is None:
        raise AuthRequired("Unauthorized: No token provided.")

    claims = verify_token(token, settings)
    if claims is None:
        raise AuthInvalid("Forbidden: Invalid or expired token.")

    structlog.contextvars.bind_contextvars(user_id=claims.user_id)
    return CurrentIdentity(user_id=claims.user_id, email=claims.email)
