# service/cache_inspector_service.py
import logging
from typing import List, Optional, Sequence, Tuple

from starlette.concurrency import run_in_threadpool

from core import key_mutator
from core.cache_client import CacheClient
from core.entities import CacheItem, Identity, Keymap, ServerEndpoint
from core.key_enumerator import enumerate_keys
from core.keymap_decoder import decode_keymap, filter_keymap
from repository.server_registry import ServerRegistry
from util.enums import ErrorMessage
from util.errors import AppError, CacheConnectionError
from util.functions import sanitize_key
from util.types import SiteFilter

logger = logging.getLogger(__name__)


class CacheInspectorService:
    """
    Async facade over the keymap core.

    The cache client blocks on sockets, so every call into it is pushed to
    the threadpool. Nothing is kept between requests: each keymap is rebuilt
    from the live server.
    """

    def __init__(
        self,
        client: CacheClient,
        registry: ServerRegistry,
        *,
        salt_offset: int = 0,
        site_filter: SiteFilter = None,
    ) -> None:
        self._client = client
        self._registry = registry
        self._salt_offset = salt_offset
        self._site_filter = site_filter

    def list_servers(self) -> Tuple[ServerEndpoint, ...]:
        return self._registry.get_servers()

    def _resolve(self, host: str) -> ServerEndpoint:
        endpoint = self._registry.find(host)
        if endpoint is None:
            logger.warning("keymap.server.unknown host=%s", host)
            raise AppError.of(ErrorMessage.UNKNOWN_SERVER)
        return endpoint

    async def get_keymap(
        self, host: str, search: Optional[str] = None
    ) -> Tuple[ServerEndpoint, Keymap]:
        endpoint = self._resolve(host)
        try:
            raw_keys = await run_in_threadpool(enumerate_keys, self._client, endpoint)
        except CacheConnectionError as e:
            logger.error(
                "keymap.server.unreachable server=%s err=%s", endpoint, e.reason
            )
            raise AppError.of(ErrorMessage.SERVER_UNREACHABLE)

        keymap = decode_keymap(raw_keys, self._salt_offset, self._site_filter)
        if search:
            keymap = filter_keymap(keymap, search)
        logger.info(
            "keymap.built server=%s raw=%d groups=%d keys=%d",
            endpoint,
            len(raw_keys),
            len(keymap),
            keymap.key_count,
        )
        return endpoint, keymap

    async def flush_groups(self, groups: Sequence[str]) -> Tuple[int, List[str]]:
        """
        Flush each (sanitized, de-duplicated) group across all servers.
        Groups that sanitize to nothing are ignored. Returns the number of
        keys cleared and the group names actually flushed.
        """
        names: List[str] = []
        for g in groups:
            name = sanitize_key(g)
            if name and name not in names:
                names.append(name)
        if not names:
            raise AppError.of(ErrorMessage.EMPTY_INPUT)

        servers = self.list_servers()
        cleared = 0
        for name in names:
            cleared += await run_in_threadpool(
                key_mutator.flush_group, self._client, servers, name
            )
        logger.info("groups.flush groups=%s cleared=%d", ",".join(names), cleared)
        return cleared, names

    async def remove_key(self, group: str, key: str) -> bool:
        self._require(group, key)
        ok = await run_in_threadpool(key_mutator.remove_key, self._client, group, key)
        logger.info("key.remove group=%s ok=%s", sanitize_key(group), ok)
        return ok

    async def remove_keys(self, group: str, keys: Sequence[str]) -> int:
        self._require(group)
        cleared = await run_in_threadpool(
            key_mutator.remove_keys, self._client, group, keys
        )
        logger.info(
            "keys.remove group=%s requested=%d cleared=%d",
            sanitize_key(group),
            len(keys),
            cleared,
        )
        return cleared

    async def clear_user(self, identity: Identity) -> int:
        return await run_in_threadpool(
            key_mutator.clear_identity_caches, self._client, identity
        )

    async def get_item(self, group: str, key: str) -> CacheItem:
        self._require(group, key)
        try:
            return await run_in_threadpool(
                key_mutator.get_item, self._client, group, key
            )
        except CacheConnectionError as e:
            logger.error("item.get.unreachable err=%s", e.reason)
            raise AppError.of(ErrorMessage.SERVER_UNREACHABLE)

    @staticmethod
    def _require(*fragments: str) -> None:
        if not all(sanitize_key(f) for f in fragments):
            raise AppError.of(ErrorMessage.EMPTY_INPUT)
