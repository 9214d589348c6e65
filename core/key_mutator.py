# core/key_mutator.py
import logging
from typing import Iterable, Sequence

from core.cache_client import CacheClient
from core.entities import CacheItem, Identity, ServerEndpoint
from core.key_enumerator import enumerate_keys
from util.constants import KEY_SEP, USER_CACHE_GROUPS
from util.errors import CacheConnectionError
from util.functions import sanitize_key

logger = logging.getLogger(__name__)


def flush_group(
    client: CacheClient, servers: Sequence[ServerEndpoint], group: str
) -> int:
    """
    Delete every raw key containing "<group>:" on every server; return how
    many deletes succeeded.

    This is a substring match on raw keys, not on decoded groups: flushing
    "posts" also removes "archived_posts:4". Pass exact, sanitized group names.
    An unreachable server is logged and skipped. An empty group flushes
    nothing, since ":" alone would match every key.
    """
    if not group:
        return 0

    needle = f"{group}{KEY_SEP}"
    cleared = 0
    for endpoint in servers:
        try:
            raw_keys = enumerate_keys(client, endpoint)
        except CacheConnectionError as e:
            logger.warning("flush.server.skip server=%s err=%s", endpoint, e.reason)
            continue
        for raw in raw_keys:
            if needle in raw and client.delete_raw(endpoint, raw):
                cleared += 1
    logger.info(
        "flush.group group=%s servers=%d cleared=%d", group, len(servers), cleared
    )
    return cleared


def remove_key(client: CacheClient, group: str, key: str) -> bool:
    return client.delete(sanitize_key(group), sanitize_key(key))


def remove_keys(client: CacheClient, group: str, keys: Iterable[str]) -> int:
    """Delete an explicit list of keys from one group; returns successful deletes."""
    safe_group = sanitize_key(group)
    return sum(1 for key in keys if client.delete(safe_group, sanitize_key(key)))


def clear_identity_caches(client: CacheClient, identity: Identity) -> int:
    """
    Drop the five cached records of one user (by id, meta, login, slug and
    email) and return how many deletes succeeded.
    """
    cleared = 0
    for group, attr in USER_CACHE_GROUPS:
        if client.delete(group, str(getattr(identity, attr))):
            cleared += 1
    logger.info("identity.clear id=%s cleared=%d", identity.numeric_id, cleared)
    return cleared


def get_item(client: CacheClient, group: str, key: str) -> CacheItem:
    return client.get(sanitize_key(group), sanitize_key(key))
