"""Pytest configuration and fixtures.

Settings are read from the environment at import time, so the required
variables are set here before any application module is imported.
FakeCacheClient stands in for memcached in core, service and API tests.
"""

import os

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")
os.environ.setdefault("ALLOWED_ORIGIN", "http://localhost:3000")
os.environ.setdefault("RATE_LIMIT_TIMES", "100")
os.environ.setdefault("RATE_LIMIT_SECONDS", "60")
os.environ.setdefault("TRUST_PROXY", "false")

import pytest  # noqa: E402

from core.entities import CacheItem, ServerEndpoint  # noqa: E402
from util.errors import CacheConnectionError  # noqa: E402

SERVER_A = ServerEndpoint(host="10.0.0.5", port=11211)
SERVER_B = ServerEndpoint(host="10.0.0.6", port=11211)


class FakeCacheClient:
    """In-memory CacheClient: slabs per server, plus a flat logical store."""

    def __init__(
        self,
        slabs: dict[ServerEndpoint, dict[int, list[str]]] | None = None,
        *,
        salt: str = "",
        unreachable: tuple[ServerEndpoint, ...] = (),
        failing: tuple[str, ...] = (),
        store: dict[str, str] | None = None,
    ) -> None:
        self.slabs = slabs or {}
        self.salt = salt
        self.unreachable = unreachable
        self.failing = failing
        self.store = dict(store or {})
        self.deleted_raw: list[tuple[ServerEndpoint, str]] = []
        self.deleted: list[tuple[str, str]] = []

    def list_slabs(self, endpoint: ServerEndpoint) -> list[int]:
        if endpoint in self.unreachable:
            raise CacheConnectionError(str(endpoint), "ConnectionRefusedError")
        return list(self.slabs.get(endpoint, {}))

    def dump_keys(self, endpoint: ServerEndpoint, slab_id: int) -> list[str]:
        return list(self.slabs.get(endpoint, {}).get(slab_id, []))

    def delete_raw(self, endpoint: ServerEndpoint, raw_key: str) -> bool:
        self.deleted_raw.append((endpoint, raw_key))
        return raw_key not in self.failing

    def full_key(self, group: str, key: str) -> str:
        parts = [self.salt, group, key] if self.salt else [group, key]
        return ":".join(parts)

    def delete(self, group: str, key: str) -> bool:
        self.deleted.append((group, key))
        full = self.full_key(group, key)
        self.store.pop(full, None)
        return full not in self.failing

    def get(self, group: str, key: str) -> CacheItem:
        full = self.full_key(group, key)
        value = self.store.get(full)
        return CacheItem(
            group=group, key=key, full_key=full, found=value is not None, value=value
        )


@pytest.fixture
def fake_client() -> FakeCacheClient:
    """Two servers: A holds a mix of global and site groups, B holds posts only."""
    return FakeCacheClient(
        {
            SERVER_A: {
                1: ["options:siteurl", "options:home", "1:posts:10"],
                2: ["users:5", "userlogins:ada", "2:posts:11"],
            },
            SERVER_B: {1: ["1:posts:12", "archived_posts:4"]},
        },
        store={"users:5": "O:8:stdClass", "1:posts:10": "a:0:{}"},
    )
