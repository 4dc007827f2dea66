"""
Session gate for the credgate admin surface.

This module issues and validates the session tokens handed out after a
successful password check. The store's TTL is the only expiry mechanism;
there is no revoke path and validation never extends a session.
"""

import logging
import secrets
from typing import Optional

from ...config.provider import AuthConfig
from ...errors import AuthError, StoreError
from ...logging_config import mask_token
from ..storage import KeyValueStore

logger = logging.getLogger(__name__)

SESSION_KEY_PREFIX = "login:token:"
SESSION_TTL_SECONDS = 24 * 60 * 60
SESSION_MARKER = "valid"


def generate_session_token() -> str:
    """Generate an opaque session token (32 random bytes, URL-safe text)."""
    return secrets.token_urlsafe(32)


def session_key(token: str) -> str:
    return f"{SESSION_KEY_PREFIX}{token}"


class SessionGate:
    """
    Gate access behind a shared password using store-backed session tokens.

    The gate keeps no state of its own; every call goes to the store.
    """

    def __init__(
        self,
        store: KeyValueStore,
        auth_config: AuthConfig,
        session_ttl: int = SESSION_TTL_SECONDS,
    ):
        """
        Initialize session gate.

        Args:
            store: Key-value store holding session markers
            auth_config: Authentication policy (disabled or password-protected)
            session_ttl: Session token lifetime in seconds
        """
        self.store = store
        self.auth_config = auth_config
        self.session_ttl = session_ttl

    @property
    def auth_enabled(self) -> bool:
        return self.auth_config.is_enabled

    def check_password(self, password: Optional[str]) -> bool:
        """
        Check a password against the configured one.

        Any password is accepted while auth is disabled.
        """
        if not self.auth_enabled:
            return True
        if not password:
            return False
        # Use constant-time comparison for security
        return secrets.compare_digest(
            password.encode("utf-8"), self.auth_config.access_password.encode("utf-8")
        )

    async def issue_session(self, password: Optional[str]) -> str:
        """
        Exchange a password for a new session token.

        Args:
            password: Password supplied by the operator

        Returns:
            Freshly generated session token

        Raises:
            AuthError: Password does not match (nothing is written)
            StoreError: Session could not be persisted
        """
        if not self.check_password(password):
            logger.warning("Login rejected: wrong password")
            raise AuthError("wrong password")

        token = generate_session_token()
        await self.store.set(session_key(token), SESSION_MARKER, ttl=self.session_ttl)

        logger.info(f"Issued session token {mask_token(token)} (ttl={self.session_ttl}s)")
        return token

    async def validate_token(self, token: Optional[str]) -> bool:
        """
        Check whether a session token is currently valid.

        Existence of the session key is sufficient. Store failures count as
        an invalid token so the gate fails closed.
        """
        if not token:
            return False

        try:
            return await self.store.exists(session_key(token))
        except StoreError as e:
            logger.warning(f"Session validation failed closed for {mask_token(token)}: {e}")
            return False

    async def authorize(self, token: Optional[str]) -> bool:
        """Decide whether a request carrying token may pass the gate."""
        if not self.auth_enabled:
            return True
        return await self.validate_token(token)
