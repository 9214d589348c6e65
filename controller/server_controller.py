# controller/server_controller.py
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from controller.controller_dependencies import (
    get_cache_inspector_service,
    rate_limiter,
)
from model.api import KeymapResponse, ServerOut, ServersResponse
from service.cache_inspector_service import CacheInspectorService
from util.constants import InternalURIs

server_router = APIRouter(dependencies=[Depends(rate_limiter)])


@server_router.get(
    InternalURIs.SERVERS,
    response_model=ServersResponse,
    status_code=status.HTTP_200_OK,
)
async def list_servers(
    service: CacheInspectorService = Depends(get_cache_inspector_service),
) -> ServersResponse:
    return ServersResponse(servers=[ServerOut.of(s) for s in service.list_servers()])


@server_router.get(
    InternalURIs.SERVER_KEYMAP,
    response_model=KeymapResponse,
    status_code=status.HTTP_200_OK,
)
async def get_keymap(
    host: str,
    search: Optional[str] = Query(default=None, max_length=200),
    service: CacheInspectorService = Depends(get_cache_inspector_service),
) -> KeymapResponse:
    endpoint, keymap = await service.get_keymap(host, search)
    return KeymapResponse.of(endpoint, keymap)
