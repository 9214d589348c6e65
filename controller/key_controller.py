# controller/key_controller.py
from fastapi import APIRouter, Depends, Query, status
from controller.controller_dependencies import (
    get_cache_inspector_service,
    rate_limiter,
)
from core.entities import Identity
from model.api import (
    CacheItemResponse,
    ClearedResponse,
    ClearUserRequest,
    FlushGroupsRequest,
    RemoveKeyRequest,
    RemoveKeyResponse,
    RemoveKeysRequest,
)
from service.cache_inspector_service import CacheInspectorService
from util import functions
from util.constants import InternalURIs

key_router = APIRouter(dependencies=[Depends(rate_limiter)])


@key_router.post(
    InternalURIs.FLUSH_GROUPS,
    response_model=ClearedResponse,
    status_code=status.HTTP_200_OK,
)
async def flush_groups(
    payload: FlushGroupsRequest,
    service: CacheInspectorService = Depends(get_cache_inspector_service),
) -> ClearedResponse:
    cleared, names = await service.flush_groups(payload.groups)
    target = ", ".join(names)
    return ClearedResponse(
        cleared=cleared,
        target=target,
        message=functions.cleared_message(cleared, target),
    )


@key_router.post(
    InternalURIs.REMOVE_GROUP_KEYS,
    response_model=ClearedResponse,
    status_code=status.HTTP_200_OK,
)
async def remove_group_keys(
    payload: RemoveKeysRequest,
    service: CacheInspectorService = Depends(get_cache_inspector_service),
) -> ClearedResponse:
    cleared = await service.remove_keys(payload.group, payload.keys)
    return ClearedResponse(
        cleared=cleared,
        target=payload.group,
        message=functions.cleared_message(cleared, payload.group),
    )


@key_router.post(
    InternalURIs.REMOVE_KEY,
    response_model=RemoveKeyResponse,
    status_code=status.HTTP_200_OK,
)
async def remove_key(
    payload: RemoveKeyRequest,
    service: CacheInspectorService = Depends(get_cache_inspector_service),
) -> RemoveKeyResponse:
    ok = await service.remove_key(payload.group, payload.key)
    return RemoveKeyResponse(ok=ok)


@key_router.get(
    InternalURIs.GET_ITEM,
    response_model=CacheItemResponse,
    status_code=status.HTTP_200_OK,
)
async def get_item(
    group: str = Query(..., min_length=1),
    key: str = Query(..., min_length=1),
    service: CacheInspectorService = Depends(get_cache_inspector_service),
) -> CacheItemResponse:
    item = await service.get_item(group, key)
    return CacheItemResponse.of(item)


@key_router.post(
    InternalURIs.CLEAR_USER,
    response_model=ClearedResponse,
    status_code=status.HTTP_200_OK,
)
async def clear_user(
    payload: ClearUserRequest,
    service: CacheInspectorService = Depends(get_cache_inspector_service),
) -> ClearedResponse:
    identity = Identity(
        numeric_id=payload.numericId,
        login_name=payload.loginName,
        normalized_name=payload.normalizedName,
        email=str(payload.email),
    )
    cleared = await service.clear_user(identity)
    target = str(identity.numeric_id)
    return ClearedResponse(
        cleared=cleared,
        target=target,
        message=functions.cleared_message(cleared, target),
    )
