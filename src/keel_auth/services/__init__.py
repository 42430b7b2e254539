"""Authentication services.

Provides JWT token management.
"""

from keel_auth.services.jwt_service import (
    JWTManager,
    extract_from_header,
    generate_token_id,
    jwt_manager,
)

__all__ = [
    "JWTManager",
    "extract_from_header",
    "generate_token_id",
    "jwt_manager",
]
