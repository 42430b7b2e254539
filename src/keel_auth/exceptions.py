"""Authentication exceptions.

These exceptions are raised by the keel_auth package and should be
caught and handled by the calling application (e.g. turned into a 401
response by the HTTP layer).
"""


class AuthError(Exception):
    """Base exception for all authentication errors."""

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(AuthError, ValueError):
    """Raised when a JWT manager is constructed with invalid configuration."""

    def __init__(self, message: str = "Invalid JWT configuration"):
        super().__init__(message)


class WeakSecretError(ConfigurationError):
    """Raised when the signing secret is too short or too predictable."""

    def __init__(self, message: str = "JWT secret has insufficient entropy"):
        super().__init__(message)


class InvalidExpiryError(ConfigurationError):
    """Raised when a configured token expiry is not a valid time span."""

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(
            f"Invalid {field}: {value!r}. "
            "Use a positive time span like '15m', '1h' or '7d' (minimum '1s').",
        )


class InvalidTimeFormatError(AuthError, ValueError):
    """Raised when a time span string cannot be parsed."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(
            f"Invalid time format: {value!r}. Use format like '15m', '1h', '7d'",
        )


class ReservedClaimError(AuthError, ValueError):
    """Raised when additional claims try to override a reserved JWT claim."""

    def __init__(self, claim: str, reserved: frozenset[str]):
        self.claim = claim
        super().__init__(
            f"Cannot override reserved JWT claim: {claim}. "
            f"Reserved claims are: {', '.join(sorted(reserved))}",
        )


class InvalidTokenError(AuthError):
    """Raised when a JWT token is invalid, expired, or malformed."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class InvalidAlgorithmError(InvalidTokenError):
    """Raised when a token header names an algorithm other than HS256."""

    def __init__(self, algorithm: object):
        self.algorithm = algorithm
        super().__init__(
            f"Invalid algorithm: {algorithm}. Only HS256 is supported.",
        )


class InvalidSignatureError(InvalidTokenError):
    """Raised when the token signature does not match its contents."""

    def __init__(self, message: str = "Invalid token signature"):
        super().__init__(message)


class TokenExpiredError(InvalidTokenError):
    """Raised when the token's ``exp`` claim lies in the past."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)


class TokenNotYetValidError(InvalidTokenError):
    """Raised when the token's ``nbf`` claim lies in the future."""

    def __init__(self, message: str = "Token not yet valid"):
        super().__init__(message)


class InvalidIssuerError(InvalidTokenError):
    def __init__(self, message: str = "Invalid token issuer"):
        super().__init__(message)


class InvalidAudienceError(InvalidTokenError):
    def __init__(self, message: str = "Invalid token audience"):
        super().__init__(message)


class InvalidTokenTypeError(InvalidTokenError):
    """Raised when an access token is presented where a refresh token is required."""

    def __init__(self, message: str = "Invalid token type: expected refresh token"):
        super().__init__(message)


class UserNotFoundError(AuthError):
    """Raised when the user behind a refresh token no longer exists."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message)
