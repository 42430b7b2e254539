"""In-memory token stores for development and testing.

NOT suitable for production: entries do not survive a restart and are
not shared between processes. Back the TokenStore interface with Redis
or a database table instead.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable

from keel_auth.timespan import utc_now

logger = logging.getLogger(__name__)

DEFAULT_REVOCATION_TTL_SECONDS = 7 * 24 * 60 * 60


class InMemoryTokenStore:
    """Set of revoked token IDs guarded by a lock."""

    def __init__(self) -> None:
        self._revoked: set[str] = set()
        self._lock = threading.Lock()

    def revoke(self, token_id: str) -> None:
        with self._lock:
            self._revoked.add(token_id)

    def is_revoked(self, token_id: str) -> bool:
        with self._lock:
            return token_id in self._revoked

    def clear(self) -> None:
        with self._lock:
            self._revoked.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._revoked)


class EnhancedTokenStore:
    """Revocation store with per-entry expiry and refresh reuse detection.

    Revoked IDs are forgotten once their expiry passes (a revoked token
    that has itself expired no longer needs tracking). Used refresh
    tokens are remembered so that a second use can be detected:

        previous_user = store.is_refresh_token_used(payload.jti)
        if previous_user is not None:
            store.revoke_all_user_tokens(previous_user)
            raise InvalidTokenError("Refresh token reuse detected")
        store.mark_refresh_token_used(payload.jti, payload.sub)

    Token IDs are indexed per user when they are tracked, revoked with a
    ``user_id`` or marked as used, so that ``revoke_all_user_tokens`` can
    revoke them. Register issued tokens with ``track_token`` to have
    outstanding ones covered as well.
    """

    def __init__(
        self,
        default_ttl_seconds: int = DEFAULT_REVOCATION_TTL_SECONDS,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if default_ttl_seconds <= 0:
            msg = "default_ttl_seconds must be positive"
            raise ValueError(msg)

        self._default_ttl = timedelta(seconds=default_ttl_seconds)
        self._clock = clock or utc_now
        self._revoked: dict[str, datetime] = {}
        self._used_refresh: dict[str, tuple[str, datetime]] = {}
        self._user_tokens: dict[str, dict[str, datetime]] = {}
        self._lock = threading.Lock()

    def _ttl(self, expires_in_seconds: int | None) -> timedelta:
        if expires_in_seconds is None:
            return self._default_ttl
        return timedelta(seconds=expires_in_seconds)

    def _index(self, user_id: str, token_id: str, expires_at: datetime) -> None:
        tokens = self._user_tokens.setdefault(user_id, {})
        tokens[token_id] = max(expires_at, tokens.get(token_id, expires_at))

    def track_token(
        self,
        token_id: str,
        user_id: str,
        expires_in_seconds: int | None = None,
    ) -> None:
        """Remember that a token belongs to a user, without revoking it."""
        with self._lock:
            self._index(user_id, token_id, self._clock() + self._ttl(expires_in_seconds))

    def revoke(
        self,
        token_id: str,
        expires_in_seconds: int | None = None,
        user_id: str | None = None,
    ) -> None:
        with self._lock:
            expires_at = self._clock() + self._ttl(expires_in_seconds)
            self._revoked[token_id] = expires_at
            if user_id is not None:
                self._index(user_id, token_id, expires_at)

    def is_revoked(self, token_id: str) -> bool:
        with self._lock:
            expires_at = self._revoked.get(token_id)
            if expires_at is None:
                return False
            if self._clock() > expires_at:
                del self._revoked[token_id]
                return False
            return True

    def mark_refresh_token_used(self, token_id: str, user_id: str) -> None:
        with self._lock:
            expires_at = self._clock() + self._default_ttl
            self._used_refresh[token_id] = (user_id, expires_at)
            self._index(user_id, token_id, expires_at)

    def is_refresh_token_used(self, token_id: str) -> str | None:
        """Return the owning user ID if the refresh token was used before."""
        with self._lock:
            entry = self._used_refresh.get(token_id)
            if entry is None:
                return None
            user_id, expires_at = entry
            if self._clock() > expires_at:
                del self._used_refresh[token_id]
                return None
            return user_id

    def revoke_all_user_tokens(self, user_id: str) -> int:
        """Revoke every known token ID of a user and return how many.

        Only IDs the store has seen for the user are covered; tokens that
        were issued but never tracked stay valid until they expire.
        """
        with self._lock:
            now = self._clock()
            revoked = 0
            for token_id, expires_at in self._user_tokens.get(user_id, {}).items():
                if expires_at < now:
                    continue
                self._revoked[token_id] = max(
                    expires_at,
                    self._revoked.get(token_id, expires_at),
                )
                revoked += 1

        logger.warning("Revoked %d tokens for user %s", revoked, user_id)
        return revoked

    def cleanup(self) -> int:
        """Drop expired entries and return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [jti for jti, exp in self._revoked.items() if now > exp]
            for jti in expired:
                del self._revoked[jti]

            used = [jti for jti, (_, exp) in self._used_refresh.items() if now > exp]
            for jti in used:
                del self._used_refresh[jti]

            for user_id in list(self._user_tokens):
                tokens = self._user_tokens[user_id]
                for jti in [jti for jti, exp in tokens.items() if now > exp]:
                    del tokens[jti]
                if not tokens:
                    del self._user_tokens[user_id]

        removed = len(expired) + len(used)
        if removed:
            logger.debug("Removed %d expired token store entries", removed)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._revoked.clear()
            self._used_refresh.clear()
            self._user_tokens.clear()


def create_in_memory_token_store() -> InMemoryTokenStore:
    """Create an in-memory revocation store."""
    return InMemoryTokenStore()


def create_enhanced_token_store(
    default_ttl_seconds: int = DEFAULT_REVOCATION_TTL_SECONDS,
) -> EnhancedTokenStore:
    """Create an in-memory store with expiry and refresh reuse detection."""
    return EnhancedTokenStore(default_ttl_seconds)
