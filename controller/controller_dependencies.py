# controller/controller_dependencies.py
from fastapi import Depends
from fastapi_limiter.depends import RateLimiter
from config.settings import settings
from core.cache_client import MemcacheClient
from repository.server_registry import ServerRegistry
from service.cache_inspector_service import CacheInspectorService

# Shared so tests can swap it out via app.dependency_overrides.
rate_limiter = RateLimiter(
    times=settings.RATE_LIMIT_TIMES, seconds=settings.RATE_LIMIT_SECONDS
)


def get_server_registry() -> ServerRegistry:
    return ServerRegistry()


def get_cache_client(
    registry: ServerRegistry = Depends(get_server_registry),
) -> MemcacheClient:
    return MemcacheClient(
        registry.get_servers(),
        salt=settings.CACHE_KEY_SALT,
        connect_timeout=settings.MEMCACHED_CONNECT_TIMEOUT,
        timeout=settings.MEMCACHED_TIMEOUT,
    )


def get_cache_inspector_service(
    client: MemcacheClient = Depends(get_cache_client),
    registry: ServerRegistry = Depends(get_server_registry),
) -> CacheInspectorService:
    site_filter = None if settings.SHOW_ALL_SITES else settings.CURRENT_SITE_ID
    return CacheInspectorService(
        client,
        registry,
        salt_offset=settings.salt_offset,
        site_filter=site_filter,
    )
