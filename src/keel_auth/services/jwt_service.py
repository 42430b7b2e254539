"""JWT token service.

Issues, verifies and rotates HS256-signed access/refresh token pairs.
"""

from __future__ import annotations

import hmac
import json
import logging
import secrets
from datetime import datetime
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Mapping

import jwt
from jwt.algorithms import HMACAlgorithm
from jwt.utils import base64url_decode, base64url_encode

from keel_auth.exceptions import (
    InvalidAlgorithmError,
    InvalidAudienceError,
    InvalidExpiryError,
    InvalidIssuerError,
    InvalidSignatureError,
    InvalidTokenError,
    InvalidTokenTypeError,
    ReservedClaimError,
    TokenExpiredError,
    TokenNotYetValidError,
    UserNotFoundError,
)
from keel_auth.schemas import (
    DEFAULT_ACCESS_EXPIRY,
    DEFAULT_REFRESH_EXPIRY,
    RESERVED_CLAIMS,
    AuthUser,
    JwtConfig,
    TokenPair,
    TokenPayload,
    TokenType,
    UserLike,
)
from keel_auth.secret_policy import validate_secret
from keel_auth.timespan import is_valid_timespan, parse_time_to_seconds, utc_now

if TYPE_CHECKING:
    from keel_config import Settings

logger = logging.getLogger(__name__)

User = UserLike | Mapping[str, Any]
UserLoader = Callable[[str], Awaitable[User | None]]


def generate_token_id() -> str:
    """Generate a unique token ID (16 random bytes, hex-encoded)."""
    return secrets.token_hex(16)


def extract_from_header(header_value: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header.

    The scheme is matched case-insensitively. Returns None for a missing
    header, any other scheme, or a scheme with no token.
    """
    if not header_value:
        return None

    parts = header_value.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        return None

    return parts[1]


def _user_identity(user: User) -> tuple[str, str]:
    if isinstance(user, Mapping):
        return str(user["id"]), user["email"]
    return str(user.id), user.email


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class JWTManager:
    """Service for JWT token creation, verification and refresh.

    Handles access tokens (short-lived) and refresh tokens (long-lived)
    signed with HS256. Tokens claiming any other algorithm are rejected
    before the signature is looked at.

    Instances hold only immutable configuration and are safe to share
    between threads and tasks.

    Examples
    --------
    >>> manager = JWTManager(secret=os.environ["JWT_SECRET"])
    >>> tokens = manager.create_token_pair({"id": "u1", "email": "a@b.c"})
    >>> payload = manager.verify_token(tokens.access_token)
    >>> print(payload.sub)
    """

    ALGORITHM = "HS256"
    HEADER_TYPE = "JWT"

    def __init__(
        self,
        secret: str,
        access_token_expiry: str | None = None,
        refresh_token_expiry: str | None = None,
        issuer: str | None = None,
        audience: str | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the JWT manager.

        Parameters
        ----------
        secret
            Secret for signing tokens; at least 64 characters of random data
        access_token_expiry
            Access token lifetime, e.g. "15m" (default "15m")
        refresh_token_expiry
            Refresh token lifetime, e.g. "7d" (default "7d")
        issuer
            Issuer to stamp into and require from tokens (optional)
        audience
            Audience to stamp into and require from tokens (optional)
        clock
            Callable returning the current aware datetime (default UTC now)

        Raises
        ------
        WeakSecretError
            If the secret is too short or too predictable
        InvalidExpiryError
            If an expiry is not a positive time span
        """
        validate_secret(secret)

        access_token_expiry = access_token_expiry or DEFAULT_ACCESS_EXPIRY
        refresh_token_expiry = refresh_token_expiry or DEFAULT_REFRESH_EXPIRY
        for field, value in (
            ("access_token_expiry", access_token_expiry),
            ("refresh_token_expiry", refresh_token_expiry),
        ):
            if not is_valid_timespan(value):
                raise InvalidExpiryError(field, value)

        self._config = JwtConfig(
            secret=secret,
            access_token_expiry=access_token_expiry,
            refresh_token_expiry=refresh_token_expiry,
            issuer=issuer,
            audience=audience,
        )
        self._access_expire_seconds = parse_time_to_seconds(access_token_expiry)
        self._refresh_expire_seconds = parse_time_to_seconds(refresh_token_expiry)
        self._clock = clock or utc_now
        self._hmac = HMACAlgorithm(HMACAlgorithm.SHA256)
        self._key = self._hmac.prepare_key(secret)

    @classmethod
    def from_config(
        cls,
        config: JwtConfig,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> JWTManager:
        return cls(
            secret=config.secret,
            access_token_expiry=config.access_token_expiry,
            refresh_token_expiry=config.refresh_token_expiry,
            issuer=config.issuer,
            audience=config.audience,
            clock=clock,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> JWTManager:
        """Build a manager from application settings."""
        return cls(
            secret=settings.jwt_secret_key.get_secret_value(),
            access_token_expiry=settings.jwt_access_token_expiry,
            refresh_token_expiry=settings.jwt_refresh_token_expiry,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
        )

    @property
    def access_token_expiry_seconds(self) -> int:
        return self._access_expire_seconds

    @property
    def refresh_token_expiry_seconds(self) -> int:
        return self._refresh_expire_seconds

    @property
    def issuer(self) -> str | None:
        return self._config.issuer

    @property
    def audience(self) -> str | None:
        return self._config.audience

    def create_token(self, payload: Mapping[str, Any], expires_in: int) -> str:
        """Sign a payload, stamping ``iat`` and ``exp``.

        Parameters
        ----------
        payload
            Claims to sign (without ``iat``/``exp``)
        expires_in
            Seconds until the token expires

        Returns
        -------
        The encoded JWT token string
        """
        now = int(self._clock().timestamp())
        claims = {**payload, "iat": now, "exp": now + expires_in}
        return jwt.encode(claims, self._config.secret, algorithm=self.ALGORITHM)

    def create_token_pair(
        self,
        user: User,
        additional_claims: Mapping[str, Any] | None = None,
    ) -> TokenPair:
        """Create an access/refresh token pair for a user.

        Parameters
        ----------
        user
            Object or mapping with ``id`` and ``email``
        additional_claims
            Custom claims to include; may not name a reserved claim

        Returns
        -------
        TokenPair with both tokens and the access token lifetime

        Raises
        ------
        ReservedClaimError
            If additional_claims contains a reserved claim name
        """
        extra = dict(additional_claims or {})
        overlap = RESERVED_CLAIMS.intersection(extra)
        if overlap:
            raise ReservedClaimError(sorted(overlap)[0], RESERVED_CLAIMS)

        user_id, email = _user_identity(user)
        base: dict[str, Any] = {"sub": user_id, "email": email}
        if self._config.issuer:
            base["iss"] = self._config.issuer
        if self._config.audience:
            base["aud"] = self._config.audience
        base.update(extra)

        access_token = self._create_typed_token(
            base,
            "access",
            self._access_expire_seconds,
        )
        refresh_token = self._create_typed_token(
            base,
            "refresh",
            self._refresh_expire_seconds,
        )

        logger.debug("Issued token pair for user: %s", user_id)
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self._access_expire_seconds,
        )

    def verify_token(self, token: str) -> TokenPayload:
        """Verify and decode a JWT token.

        Checks run in a fixed order: segment format, header algorithm and
        type, signature, required claims, expiry, not-before, issuer and
        audience. The algorithm is checked before any cryptography runs.

        Parameters
        ----------
        token
            The JWT token string to verify

        Returns
        -------
        TokenPayload containing the decoded claims

        Raises
        ------
        InvalidTokenError
            If the token is malformed, forged, expired or not for us
        """
        if not isinstance(token, str):
            raise InvalidTokenError("Invalid token format")

        segments = token.split(".")
        if len(segments) != 3 or not segments[0] or not segments[1]:
            raise InvalidTokenError("Invalid token format")

        header = self._decode_segment(segments[0])
        if header is None:
            raise InvalidTokenError("Invalid token header")

        algorithm = header.get("alg")
        if algorithm != self.ALGORITHM:
            raise InvalidAlgorithmError(algorithm)
        if header.get("typ") != self.HEADER_TYPE:
            raise InvalidTokenError("Invalid token type in header")

        signing_input = f"{segments[0]}.{segments[1]}".encode()
        expected = base64url_encode(self._hmac.sign(signing_input, self._key))
        if not hmac.compare_digest(expected, segments[2].encode()):
            raise InvalidSignatureError

        claims = self._decode_segment(segments[1])
        if claims is None:
            raise InvalidTokenError("Invalid token payload")

        if not (
            isinstance(claims.get("sub"), str)
            and isinstance(claims.get("email"), str)
            and _is_number(claims.get("iat"))
            and _is_number(claims.get("exp"))
            and claims.get("type") in ("access", "refresh")
        ):
            raise InvalidTokenError("Missing required token fields")

        now = self._clock().timestamp()
        if now >= claims["exp"]:
            raise TokenExpiredError

        nbf = claims.get("nbf")
        if _is_number(nbf) and now < nbf:
            raise TokenNotYetValidError

        if self._config.issuer and claims.get("iss") != self._config.issuer:
            raise InvalidIssuerError

        if self._config.audience and claims.get("aud") != self._config.audience:
            raise InvalidAudienceError

        return TokenPayload.from_dict(claims)

    def decode_token(self, token: str) -> dict[str, Any] | None:
        """Decode a token's payload WITHOUT verifying it.

        Useful for reading claims from expired tokens for display or
        diagnostics. Never base a trust decision on the result.
        """
        if not isinstance(token, str):
            return None

        segments = token.split(".")
        if len(segments) != 3:
            return None

        return self._decode_segment(segments[1])

    async def refresh_tokens(
        self,
        refresh_token: str,
        user_loader: UserLoader | None = None,
    ) -> TokenPair:
        """Issue a new token pair from a valid refresh token.

        The old refresh token stays valid until it expires; revoke its
        ``jti`` through a TokenStore to retire it early.

        Parameters
        ----------
        refresh_token
            A refresh token issued by this manager
        user_loader
            Async callable returning fresh user data for a user ID, or
            None if the user no longer exists (optional)

        Returns
        -------
        A brand-new TokenPair

        Raises
        ------
        InvalidTokenError
            If the token fails verification or is not a refresh token
        UserNotFoundError
            If user_loader returns no user
        """
        payload = self.verify_token(refresh_token)

        if not payload.is_refresh_token():
            raise InvalidTokenTypeError

        user: User | None
        if user_loader is not None:
            user = await user_loader(payload.sub)
            if not user:
                logger.info("Refresh rejected, user no longer exists: %s", payload.sub)
                raise UserNotFoundError
        else:
            user = AuthUser(id=payload.sub, email=payload.email)

        tokens = self.create_token_pair(user)
        logger.debug("Tokens refreshed for user: %s", payload.sub)
        return tokens

    def extract_from_header(self, header_value: str | None) -> str | None:
        """Extract a bearer token from an Authorization header value."""
        return extract_from_header(header_value)

    def _create_typed_token(
        self,
        base: Mapping[str, Any],
        token_type: TokenType,
        expires_in: int,
    ) -> str:
        payload = {**base, "type": token_type, "jti": generate_token_id()}
        return self.create_token(payload, expires_in)

    @staticmethod
    def _decode_segment(segment: str) -> dict[str, Any] | None:
        try:
            data = json.loads(base64url_decode(segment))
        except (ValueError, RecursionError):
            return None
        return data if isinstance(data, dict) else None


def jwt_manager(
    secret: str,
    access_token_expiry: str | None = None,
    refresh_token_expiry: str | None = None,
    issuer: str | None = None,
    audience: str | None = None,
    *,
    clock: Callable[[], datetime] | None = None,
) -> JWTManager:
    """Create a new JWT manager instance."""
    return JWTManager(
        secret,
        access_token_expiry,
        refresh_token_expiry,
        issuer,
        audience,
        clock=clock,
    )
