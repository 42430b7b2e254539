"""Keel Auth - JWT authentication core.

This package provides token-based authentication that is independent
of any web framework. It handles:
- HS256 access/refresh token issuance and verification
- Refresh token rotation
- Token revocation tracking (with pluggable persistence)

Architecture:
    keel_auth/
    ├── services/           # Pure logic (JWT manager)
    ├── repositories/       # Abstract interfaces
    ├── persistence/        # Implementations by technology
    │   └── memory/         # In-memory implementation
    ├── schemas.py          # Data classes
    ├── secret_policy.py    # Signing secret strength checks
    ├── timespan.py         # "15m"/"7d" duration parsing
    └── exceptions.py       # Auth exceptions

Usage:
    from keel_auth import JWTManager, create_in_memory_token_store

    manager = JWTManager(secret=settings.jwt_secret_key.get_secret_value())
    tokens = manager.create_token_pair(user, {"role": "admin"})
    payload = manager.verify_token(tokens.access_token)
"""

from keel_auth.exceptions import (
    AuthError,
    ConfigurationError,
    InvalidAlgorithmError,
    InvalidAudienceError,
    InvalidExpiryError,
    InvalidIssuerError,
    InvalidSignatureError,
    InvalidTimeFormatError,
    InvalidTokenError,
    InvalidTokenTypeError,
    ReservedClaimError,
    TokenExpiredError,
    TokenNotYetValidError,
    UserNotFoundError,
    WeakSecretError,
)
from keel_auth.persistence.memory import (
    EnhancedTokenStore,
    InMemoryTokenStore,
    create_enhanced_token_store,
    create_in_memory_token_store,
)
from keel_auth.repositories import TokenStore
from keel_auth.roles import DEFAULT_ALLOWED_ROLES, parse_user_roles
from keel_auth.schemas import (
    RESERVED_CLAIMS,
    AuthUser,
    JwtConfig,
    TokenPair,
    TokenPayload,
)
from keel_auth.secret_policy import is_weak_secret, validate_secret
from keel_auth.services import (
    JWTManager,
    extract_from_header,
    generate_token_id,
    jwt_manager,
)
from keel_auth.timespan import is_valid_timespan, parse_time_to_seconds

__all__ = [
    # Services
    "JWTManager",
    "jwt_manager",
    "generate_token_id",
    "extract_from_header",
    # Time spans
    "parse_time_to_seconds",
    "is_valid_timespan",
    # Secrets
    "is_weak_secret",
    "validate_secret",
    # Revocation
    "TokenStore",
    "InMemoryTokenStore",
    "EnhancedTokenStore",
    "create_in_memory_token_store",
    "create_enhanced_token_store",
    # Roles
    "DEFAULT_ALLOWED_ROLES",
    "parse_user_roles",
    # Schemas
    "RESERVED_CLAIMS",
    "AuthUser",
    "JwtConfig",
    "TokenPair",
    "TokenPayload",
    # Exceptions
    "AuthError",
    "ConfigurationError",
    "WeakSecretError",
    "InvalidExpiryError",
    "InvalidTimeFormatError",
    "ReservedClaimError",
    "InvalidTokenError",
    "InvalidAlgorithmError",
    "InvalidSignatureError",
    "TokenExpiredError",
    "TokenNotYetValidError",
    "InvalidIssuerError",
    "InvalidAudienceError",
    "InvalidTokenTypeError",
    "UserNotFoundError",
]
