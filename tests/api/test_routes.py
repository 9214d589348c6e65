"""HTTP tests for the inspector routes, with the cache client faked out."""

import pytest
from httpx import ASGITransport, AsyncClient

from conftest import FakeCacheClient
from controller.controller_dependencies import (
    get_cache_inspector_service,
    rate_limiter,
)
from main import app
from repository.server_registry import ServerRegistry
from service.cache_inspector_service import CacheInspectorService


async def _no_limit() -> None:
    return None


@pytest.fixture
async def client(fake_client: FakeCacheClient) -> AsyncClient:
    service = CacheInspectorService(
        fake_client, ServerRegistry(servers="10.0.0.5,10.0.0.6"), site_filter=1
    )
    app.dependency_overrides[get_cache_inspector_service] = lambda: service
    app.dependency_overrides[rate_limiter] = _no_limit
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def test_healthz(client: AsyncClient) -> None:
    response = await client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


async def test_list_servers(client: AsyncClient) -> None:
    response = await client.get("/api/v1/servers")
    assert response.status_code == 200
    assert response.json() == {
        "servers": [
            {"host": "10.0.0.5", "port": 11211},
            {"host": "10.0.0.6", "port": 11211},
        ]
    }


async def test_keymap(client: AsyncClient) -> None:
    response = await client.get("/api/v1/servers/10.0.0.5/keymap")
    assert response.status_code == 200
    data = response.json()
    assert data["server"] == {"host": "10.0.0.5", "port": 11211}
    assert [(g["siteId"], g["group"]) for g in data["groups"]] == [
        (0, "options"),
        (0, "userlogins"),
        (0, "users"),
        (1, "posts"),
    ]
    assert data["groups"][0] == {
        "siteId": 0,
        "group": "options",
        "keys": ["siteurl", "home"],
        "count": 2,
    }
    assert data["totalKeys"] == 5


async def test_keymap_search(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/servers/10.0.0.5/keymap", params={"search": "home"}
    )
    assert response.status_code == 200
    assert response.json()["groups"] == [
        {"siteId": 0, "group": "options", "keys": ["home"], "count": 1}
    ]


async def test_keymap_unknown_server(client: AsyncClient) -> None:
    response = await client.get("/api/v1/servers/10.1.1.1/keymap")
    assert response.status_code == 404
    assert response.json()["detail"] == "Unknown cache server"


async def test_flush_groups(client: AsyncClient, fake_client: FakeCacheClient) -> None:
    response = await client.post("/api/v1/groups/flush", json={"groups": ["options"]})
    assert response.status_code == 200
    assert response.json() == {
        "cleared": 2,
        "target": "options",
        "message": "Cleared 2 keys from options group(s).",
    }
    assert [raw for _, raw in fake_client.deleted_raw] == [
        "options:siteurl",
        "options:home",
    ]


async def test_flush_groups_reports_sanitized_names(
    client: AsyncClient, fake_client: FakeCacheClient
) -> None:
    response = await client.post(
        "/api/v1/groups/flush", json={"groups": ["options", "options", "Users!"]}
    )
    assert response.status_code == 200
    assert response.json() == {
        "cleared": 3,
        "target": "options, sers",
        "message": "Cleared 3 keys from options, sers group(s).",
    }


async def test_flush_groups_all_unsafe(client: AsyncClient) -> None:
    response = await client.post("/api/v1/groups/flush", json={"groups": ["!!!"]})
    assert response.status_code == 422
    assert response.json()["detail"] == "Group or key is empty after sanitization"


async def test_flush_groups_requires_a_group(client: AsyncClient) -> None:
    response = await client.post("/api/v1/groups/flush", json={"groups": []})
    assert response.status_code == 422


async def test_remove_group_keys(
    client: AsyncClient, fake_client: FakeCacheClient
) -> None:
    response = await client.post(
        "/api/v1/groups/keys/remove", json={"group": "1:posts", "keys": ["10", "11"]}
    )
    assert response.status_code == 200
    assert response.json()["cleared"] == 2
    assert fake_client.deleted == [("1:posts", "10"), ("1:posts", "11")]


async def test_remove_key(client: AsyncClient, fake_client: FakeCacheClient) -> None:
    response = await client.post(
        "/api/v1/keys/remove", json={"group": "users", "key": "5"}
    )
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert fake_client.deleted == [("users", "5")]


async def test_remove_key_unsafe_input(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/keys/remove", json={"group": "USERS", "key": "5"}
    )
    assert response.status_code == 422


async def test_get_item(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/keys/item", params={"group": "users", "key": "5"}
    )
    assert response.status_code == 200
    assert response.json() == {
        "group": "users",
        "key": "5",
        "fullKey": "users:5",
        "found": True,
        "value": "O:8:stdClass",
    }


async def test_clear_user(client: AsyncClient, fake_client: FakeCacheClient) -> None:
    response = await client.post(
        "/api/v1/users/clear",
        json={
            "numericId": 5,
            "loginName": "ada",
            "normalizedName": "ada-lovelace",
            "email": "ada@example.com",
        },
    )
    assert response.status_code == 200
    assert response.json()["cleared"] == 5
    assert response.json()["target"] == "5"
    assert ("userslugs", "ada-lovelace") in fake_client.deleted
