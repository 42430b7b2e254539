"""In-memory implementations of the keel_auth repository interfaces."""

from keel_auth.persistence.memory.token_store import (
    EnhancedTokenStore,
    InMemoryTokenStore,
    create_enhanced_token_store,
    create_in_memory_token_store,
)

__all__ = [
    "EnhancedTokenStore",
    "InMemoryTokenStore",
    "create_enhanced_token_store",
    "create_in_memory_token_store",
]
