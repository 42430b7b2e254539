"""Token revocation store interface.

This interface defines the contract for revocation persistence.
Implementations can keep revoked token IDs in memory, Redis, a database
table, or any other shared storage.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class TokenStore(Protocol):
    """Tracks revoked token identifiers (usually the ``jti`` claim).

    JWTManager does not consult the store; callers check it after
    ``verify_token`` succeeds:

        payload = manager.verify_token(token)
        if store.is_revoked(payload.jti):
            raise InvalidTokenError("Token has been revoked")
    """

    def revoke(self, token_id: str) -> None:
        """Mark a token ID as revoked."""
        ...

    def is_revoked(self, token_id: str) -> bool:
        """Check whether a token ID has been revoked."""
        ...

    def clear(self) -> None:
        """Forget all revoked token IDs."""
        ...
