"""Session tokens and the bearer credential they carry.

Sign-in (Google OAuth) happens outside this service. Its outcome is a
signed session token holding the platform access token::

    {
        "sub": "...", "email": "...", "name": "...",
        "access_token": "ya29...",
        "access_token_expires": 1760000000,
        "error": "RefreshAccessTokenError",   # optional
        "exp": ...,
    }

Access tokens are never refreshed here. Once they expire the credential is
reported as EXPIRED and callers must sign in again.
"""

import time
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

from jose import JWTError, jwt

from sweeper.config.settings import Settings, get_settings


REFRESH_ERROR = "RefreshAccessTokenError"


class CredentialStatus(str, Enum):
    """Usability of a bearer credential."""

    VALID = "valid"
    EXPIRED = "expired"  # expired and cannot be refreshed


@dataclass(frozen=True)
class BearerCredential:
    """Platform bearer token on behalf of the signed-in user."""

    access_token: str | None
    status: CredentialStatus = CredentialStatus.VALID
    expires_at: int | None = None


@dataclass(frozen=True)
class Session:
    """Decoded session token."""

    subject: str
    email: str | None
    name: str | None
    credential: BearerCredential


def create_session_token(
    subject: str,
    *,
    access_token: str | None,
    access_token_expires: int | None = None,
    email: str | None = None,
    name: str | None = None,
    error: str | None = None,
    settings: Settings | None = None,
) -> str:
    """Issue a signed session token.

    Args:
        subject: Signed-in user identifier.
        access_token: Platform bearer token from the OAuth sign-in.
        access_token_expires: Access token expiry as epoch seconds.
        email: User email.
        name: User display name.
        error: Refresh error marker set by the sign-in side.
        settings: Settings override (defaults to cached settings).

    Returns:
        Encoded JWT string.
    """
    settings = settings or get_settings()
    now = datetime.now(UTC)
    claims: dict[str, Any] = {
        "sub": subject,
        "email": email,
        "name": name,
        "access_token": access_token,
        "access_token_expires": access_token_expires,
        "iat": now,
        "exp": now + timedelta(minutes=settings.auth_session_max_age_minutes),
    }
    if error:
        claims["error"] = error

    return jwt.encode(claims, settings.auth_secret_key, algorithm=settings.auth_algorithm)


def credential_from_claims(
    claims: dict[str, Any], *, now: float | None = None
) -> BearerCredential:
    """Build the bearer credential described by session claims."""
    access_token = claims.get("access_token") or None
    expires_at = claims.get("access_token_expires")
    now = time.time() if now is None else now

    expired = claims.get("error") == REFRESH_ERROR or (
        expires_at is not None and now >= expires_at
    )
    return BearerCredential(
        access_token=access_token,
        status=CredentialStatus.EXPIRED if expired else CredentialStatus.VALID,
        expires_at=expires_at,
    )


class SessionCredentialSupplier:
    """Resolves an inbound session token into a Session, or None."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def resolve(self, token: str | None) -> Session | None:
        """Decode a session token.

        Returns:
            The session, or None when the token is absent, forged or expired.
        """
        if not token:
            return None

        try:
            claims = jwt.decode(
                token,
                self.settings.auth_secret_key,
                algorithms=[self.settings.auth_algorithm],
            )
        except JWTError:
            return None

        subject = claims.get("sub")
        if not subject:
            return None

        return Session(
            subject=subject,
            email=claims.get("email"),
            name=claims.get("name"),
            credential=credential_from_claims(claims),
        )
