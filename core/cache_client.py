# core/cache_client.py
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from pymemcache.client.base import Client
from pymemcache.exceptions import (
    MemcacheError,
    MemcacheIllegalInputError,
    MemcacheUnexpectedCloseError,
)

from core.entities import CacheItem, ServerEndpoint
from util.constants import KEY_SEP
from util.errors import CacheConnectionError
from util.types import RawKey, SlabId

logger = logging.getLogger(__name__)


class CacheClient(Protocol):
    """Operations the inspector needs from a memcached client."""

    def list_slabs(self, endpoint: ServerEndpoint) -> List[SlabId]: ...

    def dump_keys(self, endpoint: ServerEndpoint, slab_id: SlabId) -> List[RawKey]: ...

    def delete(self, group: str, key: str) -> bool: ...

    def delete_raw(self, endpoint: ServerEndpoint, raw_key: RawKey) -> bool: ...

    def get(self, group: str, key: str) -> CacheItem: ...

    def full_key(self, group: str, key: str) -> str: ...


def _to_text(name: Any) -> Optional[str]:
    if isinstance(name, bytes):
        try:
            return name.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if isinstance(name, str):
        return name
    return None


class MemcacheClient:
    """
    pymemcache-backed CacheClient.

    Every call opens a short-lived base Client per endpoint. Logical get and
    delete build the full key ([salt:]group:key) and visit every node in the
    registry snapshot: the owning application hashes keys onto nodes with
    its own scheme, so any node may hold a given key.
    """

    def __init__(
        self,
        servers: Sequence[ServerEndpoint],
        *,
        salt: str = "",
        connect_timeout: float = 2.0,
        timeout: float = 5.0,
        client_factory: Callable[..., Any] = Client,
    ) -> None:
        self._servers = tuple(servers)
        self._salt = salt
        self._connect_timeout = connect_timeout
        self._timeout = timeout
        self._client_factory = client_factory

    def _connect(self, endpoint: ServerEndpoint) -> Any:
        return self._client_factory(
            (endpoint.host, endpoint.port),
            connect_timeout=self._connect_timeout,
            timeout=self._timeout,
        )

    # ---------------- Administrative (per endpoint) ----------------

    def _stats(self, endpoint: ServerEndpoint, *args: str) -> Dict[Any, Any]:
        client = self._connect(endpoint)
        try:
            return client.stats(*args)
        except (OSError, MemcacheUnexpectedCloseError) as e:
            logger.warning(
                "memcache.stats.unreachable server=%s args=%s err=%s",
                endpoint,
                " ".join(args),
                type(e).__name__,
            )
            raise CacheConnectionError(str(endpoint), type(e).__name__) from e
        finally:
            client.close()

    def list_slabs(self, endpoint: ServerEndpoint) -> List[SlabId]:
        """
        Slab ids from `stats slabs`, in first-seen order.
        Per-slab stats are named "<id>:<field>"; summary stats
        (active_slabs, total_malloced) carry no id and are ignored.
        """
        try:
            stats = self._stats(endpoint, "slabs")
        except MemcacheError as e:
            logger.warning(
                "memcache.slabs.garbled server=%s err=%s", endpoint, type(e).__name__
            )
            return []

        slabs: List[SlabId] = []
        for name in stats:
            text = _to_text(name)
            if text is None:
                continue
            head, sep, _ = text.partition(KEY_SEP)
            if not sep or not head.isdigit():
                continue
            slab_id = int(head)
            if slab_id not in slabs:
                slabs.append(slab_id)
        return slabs

    def dump_keys(self, endpoint: ServerEndpoint, slab_id: SlabId) -> List[RawKey]:
        """
        Key names from `stats cachedump <slab> 0`, in dump order.
        A slab whose dump is rejected or garbled yields no keys.
        """
        try:
            dump = self._stats(endpoint, "cachedump", str(slab_id), "0")
        except MemcacheError as e:
            logger.debug(
                "memcache.cachedump.skip server=%s slab=%d err=%s",
                endpoint,
                slab_id,
                type(e).__name__,
            )
            return []
        if not isinstance(dump, dict):
            return []

        keys: List[RawKey] = []
        for name in dump:
            text = _to_text(name)
            if text:
                keys.append(text)
        return keys

    def delete_raw(self, endpoint: ServerEndpoint, raw_key: RawKey) -> bool:
        client = self._connect(endpoint)
        try:
            return bool(client.delete(raw_key, noreply=False))
        except MemcacheIllegalInputError:
            logger.warning("memcache.delete.illegal server=%s", endpoint)
            return False
        except (OSError, MemcacheError) as e:
            logger.warning(
                "memcache.delete.failed server=%s err=%s",
                endpoint,
                type(e).__name__,
            )
            return False
        finally:
            client.close()

    # ---------------- Logical (group, key) across every node ----------------

    def full_key(self, group: str, key: str) -> str:
        parts = [group, key]
        if self._salt:
            parts.insert(0, self._salt)
        return KEY_SEP.join(parts)

    def delete(self, group: str, key: str) -> bool:
        """True when at least one node held (and dropped) the key."""
        full = self.full_key(group, key)
        deleted = False
        for endpoint in self._servers:
            if self.delete_raw(endpoint, full):
                deleted = True
        return deleted

    def get(self, group: str, key: str) -> CacheItem:
        """
        First value any node returns for the key. Raises CacheConnectionError
        only when no node could be reached at all.
        """
        full = self.full_key(group, key)
        missing = CacheItem(group=group, key=key, full_key=full, found=False)
        reached = 0
        for endpoint in self._servers:
            client = self._connect(endpoint)
            try:
                raw = client.get(full)
            except MemcacheIllegalInputError:
                return missing
            except (OSError, MemcacheError) as e:
                logger.warning(
                    "memcache.get.failed server=%s err=%s", endpoint, type(e).__name__
                )
                continue
            finally:
                client.close()

            reached += 1
            if raw is None:
                continue
            if isinstance(raw, bytes):
                value = raw.decode("utf-8", errors="replace")
            else:
                value = str(raw)
            return CacheItem(group=group, key=key, full_key=full, found=True, value=value)

        if self._servers and not reached:
            raise CacheConnectionError("all servers", "no node reachable")
        return missing
