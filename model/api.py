# model/api.py
from pydantic import BaseModel, EmailStr, Field
from core.entities import CacheItem, GroupEntry, Keymap, ServerEndpoint


class ServerOut(BaseModel):
    host: str
    port: int

    @classmethod
    def of(cls, endpoint: ServerEndpoint) -> "ServerOut":
        return cls(host=endpoint.host, port=endpoint.port)


class ServersResponse(BaseModel):
    servers: list[ServerOut]


class GroupEntryOut(BaseModel):
    siteId: int
    group: str
    keys: list[str]
    count: int

    @classmethod
    def of(cls, entry: GroupEntry) -> "GroupEntryOut":
        return cls(
            siteId=entry.site_scope,
            group=entry.group,
            keys=list(entry.keys),
            count=entry.count,
        )


class KeymapResponse(BaseModel):
    server: ServerOut
    groups: list[GroupEntryOut]
    totalKeys: int

    @classmethod
    def of(cls, endpoint: ServerEndpoint, keymap: Keymap) -> "KeymapResponse":
        return cls(
            server=ServerOut.of(endpoint),
            groups=[GroupEntryOut.of(e) for e in keymap.sorted_entries()],
            totalKeys=keymap.key_count,
        )


class FlushGroupsRequest(BaseModel):
    groups: list[str] = Field(min_length=1)


class RemoveKeysRequest(BaseModel):
    group: str = Field(min_length=1)
    keys: list[str] = Field(min_length=1)


class RemoveKeyRequest(BaseModel):
    group: str = Field(min_length=1)
    key: str = Field(min_length=1)


class ClearUserRequest(BaseModel):
    numericId: int = Field(ge=1)
    loginName: str = Field(min_length=1)
    normalizedName: str = Field(min_length=1)
    email: EmailStr


class ClearedResponse(BaseModel):
    cleared: int
    target: str
    message: str


class RemoveKeyResponse(BaseModel):
    ok: bool


class CacheItemResponse(BaseModel):
    group: str
    key: str
    fullKey: str
    found: bool
    value: str | None = None

    @classmethod
    def of(cls, item: CacheItem) -> "CacheItemResponse":
        return cls(
            group=item.group,
            key=item.key,
            fullKey=item.full_key,
            found=item.found,
            value=item.value,
        )
