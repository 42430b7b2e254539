"""Signing secret strength checks.

A JWT manager refuses to start with a secret that is short or easy to
guess. The checks here are pure lookups and run once, at construction.
"""

from keel_auth.exceptions import WeakSecretError

# 64 characters = 512 bits; HS256 needs at least 256
MIN_SECRET_LENGTH = 64

# Diversity floor applied to secrets of at least this length
DIVERSITY_CHECK_LENGTH = 32
MIN_UNIQUE_CHARS = 4

WEAK_SECRET_PATTERNS: frozenset[str] = frozenset(
    {
        "secret",
        "password",
        "test",
        "development",
        "changeme",
        "admin",
        "123456",
        "qwerty",
    },
)


def is_weak_secret(value: str) -> bool:
    """Return True if the secret looks predictable.

    Detects a single repeated character, common weak phrases
    (case-insensitive substring match) and very low character diversity.

    Examples
    --------
    >>> is_weak_secret("password123")
    True
    >>> is_weak_secret("aaaaaaaaaa")
    True
    >>> is_weak_secret("K8sX#mP2qR!nL4wJ@bY9zC&vD")
    False
    """
    if value and len(set(value)) == 1:
        return True

    lowered = value.lower()
    if any(pattern in lowered for pattern in WEAK_SECRET_PATTERNS):
        return True

    return len(value) >= DIVERSITY_CHECK_LENGTH and len(set(value)) < MIN_UNIQUE_CHARS


def validate_secret(value: str) -> None:
    """Validate a signing secret.

    Raises
    ------
    WeakSecretError
        If the secret is shorter than ``MIN_SECRET_LENGTH`` or fails the
        entropy check
    """
    if not value or len(value) < MIN_SECRET_LENGTH:
        msg = (
            f"JWT secret must be at least {MIN_SECRET_LENGTH} characters long "
            "(512 bits). Generate with: openssl rand -base64 64"
        )
        raise WeakSecretError(msg)

    if is_weak_secret(value):
        msg = (
            "JWT secret has insufficient entropy. "
            "Use cryptographically random data, not a word or repeated pattern."
        )
        raise WeakSecretError(msg)
