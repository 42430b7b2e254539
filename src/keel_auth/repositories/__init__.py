"""Repository interfaces for keel_auth.

This package defines the interfaces that can be implemented by
different persistence technologies (in-memory, Redis, SQL, etc.).
"""

from keel_auth.repositories.token_store import TokenStore

__all__ = ["TokenStore"]
