"""Auth schemas and data structures.

These are simple data classes used for transferring token data
between the JWT manager and its callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal, Mapping, Protocol

TokenType = Literal["access", "refresh"]

# Claims managed by JWTManager; additional claims may not redefine them
RESERVED_CLAIMS: frozenset[str] = frozenset(
    {"sub", "iss", "aud", "exp", "iat", "jti", "nbf", "type", "email"},
)

DEFAULT_ACCESS_EXPIRY = "15m"
DEFAULT_REFRESH_EXPIRY = "7d"


class UserLike(Protocol):
    """Anything with an ``id`` and an ``email`` can receive tokens."""

    id: Any
    email: str


@dataclass(frozen=True)
class AuthUser:
    """Minimal user identity carried in tokens."""

    id: str
    email: str


@dataclass(frozen=True)
class JwtConfig:
    """Immutable JWT manager configuration.

    Attributes
    ----------
    secret
        HMAC signing secret (at least 64 characters)
    access_token_expiry
        Access token lifetime as a time span, e.g. "15m"
    refresh_token_expiry
        Refresh token lifetime as a time span, e.g. "7d"
    issuer
        Value for the ``iss`` claim; checked on verification when set
    audience
        Value for the ``aud`` claim; checked on verification when set
    """

    secret: str = field(repr=False)
    access_token_expiry: str = DEFAULT_ACCESS_EXPIRY
    refresh_token_expiry: str = DEFAULT_REFRESH_EXPIRY
    issuer: str | None = None
    audience: str | None = None


@dataclass(frozen=True)
class TokenPair:
    """Access/refresh token pair handed back to the caller."""

    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "Bearer"

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camel-case keys used on the wire."""
        return {
            "accessToken": self.access_token,
            "refreshToken": self.refresh_token,
            "expiresIn": self.expires_in,
            "tokenType": self.token_type,
        }


@dataclass(frozen=True)
class TokenPayload:
    """Decoded and verified JWT token payload.

    Attributes
    ----------
    sub
        The user's identifier
    email
        The user's email address
    type
        Either "access" or "refresh"
    iat
        Issued-at, seconds since the epoch
    exp
        Expiry, seconds since the epoch
    jti
        Unique token identifier, used for revocation
    iss, aud, nbf
        Optional registered claims
    claims
        Additional non-reserved claims supplied at issuance
    """

    sub: str
    email: str
    type: str
    iat: int
    exp: int
    jti: str | None = None
    iss: str | None = None
    aud: str | None = None
    nbf: int | None = None
    claims: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TokenPayload:
        return cls(
            sub=data["sub"],
            email=data["email"],
            type=data["type"],
            iat=data["iat"],
            exp=data["exp"],
            jti=data.get("jti"),
            iss=data.get("iss"),
            aud=data.get("aud"),
            nbf=data.get("nbf"),
            claims={k: v for k, v in data.items() if k not in RESERVED_CLAIMS},
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the full claim set as it appears in the token."""
        data: dict[str, Any] = dict(self.claims)
        data.update(
            sub=self.sub,
            email=self.email,
            type=self.type,
            iat=self.iat,
            exp=self.exp,
        )
        for name in ("jti", "iss", "aud", "nbf"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data

    @property
    def user_id(self) -> str:
        return self.sub

    @property
    def issued_at(self) -> datetime:
        return datetime.fromtimestamp(self.iat, tz=timezone.utc)

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.exp, tz=timezone.utc)

    def is_access_token(self) -> bool:
        """Check if this is an access token."""
        return self.type == "access"

    def is_refresh_token(self) -> bool:
        """Check if this is a refresh token."""
        return self.type == "refresh"
