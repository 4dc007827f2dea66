import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ...errors import ClientError, NotFoundError, StoreError
from ...logging_config import mask_key, mask_token
from ..storage import KeyValueStore

logger = logging.getLogger(__name__)

TOKEN_KEY_PREFIX = "token:"
TENANT_URL_FIELD = "tenant_url"
CURRENT_TOKEN_KEY = "current_token"

# Returned when no credential can be selected
EMPTY_SELECTION: Tuple[str, str] = ("", "")


@dataclass(frozen=True)
class Credential:
    """An upstream API token and the tenant endpoint it belongs to."""
    token: str
    tenant_url: str


def token_key(token: str) -> str:
    return f"{TOKEN_KEY_PREFIX}{token}"


class CredentialPool:
    def __init__(self, store: KeyValueStore, rng: Optional[random.Random] = None):
        """
        Initialize credential pool.

        Args:
            store: Key-value store holding credential records
            rng: Random generator used for selection (load spreading only,
                 does not need to be cryptographic)
        """
        self.store = store
        self.rng = rng or random.Random()

    async def register(self, token: str, tenant_url: str) -> None:
        """
        Create or overwrite a credential record.

        Registering an existing token replaces its tenant URL.

        Raises:
            ClientError: token or tenant_url is empty
            StoreError: record could not be written
        """
        if not token:
            raise ClientError("token is required")
        if not tenant_url:
            raise ClientError("tenant_url is required")

        await self.store.hset(token_key(token), TENANT_URL_FIELD, tenant_url)
        logger.info(f"Registered credential {mask_token(token)} for {tenant_url}")

    async def list_credentials(self) -> List[Credential]:
        """
        List all registered credentials.

        Best-effort snapshot: the key enumeration and the per-key reads are
        separate store calls, so a record deleted in between is skipped
        instead of failing the whole listing.

        Raises:
            StoreError: the key enumeration itself failed
        """
        keys = await self.store.keys_with_prefix(TOKEN_KEY_PREFIX)

        credentials = []
        for key in keys:
            try:
                tenant_url = await self.store.hget(key, TENANT_URL_FIELD)
            except StoreError as e:
                logger.debug(f"Skipping credential {mask_key(key)}: {e}")
                continue

            if tenant_url is None:
                continue

            credentials.append(Credential(token=key[len(TOKEN_KEY_PREFIX):], tenant_url=tenant_url))

        return credentials

    async def pick_random(self) -> Tuple[str, str]:
        """
        Pick one credential uniformly at random.

        Returns:
            (token, tenant_url), or ("", "") when the pool is empty or the
            chosen record cannot be read. No retry with another key.
        """
        try:
            keys = await self.store.keys_with_prefix(TOKEN_KEY_PREFIX)
        except StoreError as e:
            logger.warning(f"Random credential selection failed: {e}")
            return EMPTY_SELECTION

        if not keys:
            return EMPTY_SELECTION

        key = self.rng.choice(keys)

        try:
            tenant_url = await self.store.hget(key, TENANT_URL_FIELD)
        except StoreError as e:
            logger.warning(f"Random credential selection failed: {e}")
            return EMPTY_SELECTION

        if tenant_url is None:
            return EMPTY_SELECTION

        return key[len(TOKEN_KEY_PREFIX):], tenant_url

    async def delete(self, token: str) -> None:
        """
        Remove a credential record.

        Raises:
            ClientError: token is empty
            NotFoundError: no such credential
            StoreError: store communication failed
        """
        await self._require_existing(token)
        await self.store.delete(token_key(token))
        logger.info(f"Deleted credential {mask_token(token)}")

    async def pin(self, token: str) -> None:
        """
        Mark a credential as the current one.

        Only the pointer is written; the tenant URL is not checked.

        Raises:
            ClientError: token is empty
            NotFoundError: no such credential
            StoreError: store communication failed
        """
        await self._require_existing(token)
        await self.store.set(CURRENT_TOKEN_KEY, token)
        logger.info(f"Pinned credential {mask_token(token)} as current")

    async def get_active(self) -> Optional[Credential]:
        """
        Get the pinned credential.

        Returns:
            The pinned credential, or None when nothing is pinned or the
            pinned record no longer exists
        """
        token = await self.store.get(CURRENT_TOKEN_KEY)
        if not token:
            return None

        tenant_url = await self.store.hget(token_key(token), TENANT_URL_FIELD)
        if tenant_url is None:
            return None

        return Credential(token=token, tenant_url=tenant_url)

    async def select(self) -> Tuple[str, str]:
        """
        Choose the credential for an outbound request.

        The pinned credential wins; otherwise one is picked at random.
        """
        try:
            active = await self.get_active()
        except StoreError as e:
            logger.warning(f"Reading pinned credential failed, falling back to random: {e}")
            active = None

        if active:
            return active.token, active.tenant_url

        return await self.pick_random()

    async def _require_existing(self, token: str) -> None:
        if not token:
            raise ClientError("token is required")

        if not await self.store.exists(token_key(token)):
            raise NotFoundError(f"token {mask_token(token)} does not exist")
