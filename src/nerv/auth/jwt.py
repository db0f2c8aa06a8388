"""JWT token creation and verification.

Learn: Tokens are short-lived (60 min by default) bearer credentials carrying
the user id (sub) and email. They are never stored server-side.

verify_token() never raises: every failure becomes None. The reason is
logged (expired, malformed, bad_signature, invalid) but callers cannot
tell the cases apart.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
import structlog

from nerv.config import Settings

logger = structlog.get_logger()


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of a session token."""

    user_id: str
    email: str
    issued_at: datetime
    expires_at: datetime


def issue_token(
    user_id: str,
    email: str,
    settings: Settings,
    expires_minutes: Optional[int] = None,
) -> str:
    """Create a signed access token for a user."""
    now = datetime.now(timezone.utc)
    if expires_minutes is None:
        expires_minutes = settings.access_token_expire_minutes
    expires = now + timedelta(minutes=expires_minutes)
    payload = {
        "sub": user_id,
        "email": email,
        "iat": now,
        "exp": expires,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: Settings) -> Optional[TokenClaims]:
    """Verify and decode a token.

    Returns the claims on success, None on any failure.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "email", "iat", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        _rejected("expired")
        return None
    except jwt.InvalidSignatureError:
        _rejected("bad_signature")
        return None
    except jwt.DecodeError:
        _rejected("malformed")
        return None
    except jwt.InvalidTokenError as e:
        _rejected("invalid", error=str(e))
        return None

    user_id = payload.get("sub")
    email = payload.get("email")
    if not isinstance(user_id, str) or not isinstance(email, str):
        _rejected("invalid", error="missing identity claims")
        return None

    return TokenClaims(
        user_id=user_id,
        email=email,
        issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )


def _rejected(reason: str, **extra) -> None:
    logger.warning("auth.token_rejected", reason=reason, **extra)
