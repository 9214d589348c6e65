"""Tests for group flushes, key removal and identity cache clearing."""

from conftest import SERVER_A, SERVER_B, FakeCacheClient
from core import key_mutator
from core.entities import Identity


class TestFlushGroup:
    """Substring flush across servers."""

    def test_substring_match_over_deletes(self) -> None:
        client = FakeCacheClient(
            {
                SERVER_A: {
                    1: ["posts:1", "posts:2", "postsarchive:9", "archived_posts:4"]
                }
            }
        )
        cleared = key_mutator.flush_group(client, [SERVER_A], "posts")
        # "archived_posts:4" contains "posts:" and goes too; "postsarchive:9" does not.
        assert cleared == 3
        assert [raw for _, raw in client.deleted_raw] == [
            "posts:1",
            "posts:2",
            "archived_posts:4",
        ]

    def test_site_scoped_keys_match(self, fake_client: FakeCacheClient) -> None:
        cleared = key_mutator.flush_group(fake_client, [SERVER_A, SERVER_B], "posts")
        assert cleared == 4
        assert (SERVER_B, "1:posts:12") in fake_client.deleted_raw
        assert (SERVER_A, "2:posts:11") in fake_client.deleted_raw

    def test_failed_deletes_not_counted(self) -> None:
        client = FakeCacheClient(
            {SERVER_A: {1: ["posts:1", "posts:2"]}}, failing=("posts:2",)
        )
        assert key_mutator.flush_group(client, [SERVER_A], "posts") == 1

    def test_unreachable_server_is_skipped(self) -> None:
        client = FakeCacheClient(
            {SERVER_A: {1: ["posts:1"]}, SERVER_B: {1: ["posts:2"]}},
            unreachable=(SERVER_A,),
        )
        assert key_mutator.flush_group(client, [SERVER_A, SERVER_B], "posts") == 1
        assert client.deleted_raw == [(SERVER_B, "posts:2")]

    def test_empty_group_flushes_nothing(self, fake_client: FakeCacheClient) -> None:
        assert key_mutator.flush_group(fake_client, [SERVER_A], "") == 0
        assert fake_client.deleted_raw == []

    def test_no_servers(self, fake_client: FakeCacheClient) -> None:
        assert key_mutator.flush_group(fake_client, [], "posts") == 0


class TestRemoveKey:
    def test_inputs_are_sanitized(self, fake_client: FakeCacheClient) -> None:
        key_mutator.remove_key(fake_client, "Posts!", "ABC123")
        assert fake_client.deleted == [("osts", "123")]

    def test_returns_adapter_result(self) -> None:
        client = FakeCacheClient(failing=("1:posts:10",))
        assert key_mutator.remove_key(client, "1:posts", "10") is False
        assert key_mutator.remove_key(client, "1:posts", "11") is True

    def test_remove_keys_counts_successes(self) -> None:
        client = FakeCacheClient(failing=("options:b",))
        cleared = key_mutator.remove_keys(client, "options", ["a", "b", "c"])
        assert cleared == 2
        assert client.deleted == [("options", "a"), ("options", "b"), ("options", "c")]


class TestClearIdentityCaches:
    identity = Identity(
        numeric_id=5,
        login_name="ada",
        normalized_name="ada-lovelace",
        email="ada@example.com",
    )

    def test_five_groups_in_order(self, fake_client: FakeCacheClient) -> None:
        cleared = key_mutator.clear_identity_caches(fake_client, self.identity)
        assert fake_client.deleted == [
            ("users", "5"),
            ("user_meta", "5"),
            ("userlogins", "ada"),
            ("userslugs", "ada-lovelace"),
            ("useremail", "ada@example.com"),
        ]
        assert cleared == 5

    def test_count_reflects_failures(self) -> None:
        client = FakeCacheClient(failing=("user_meta:5", "useremail:ada@example.com"))
        assert key_mutator.clear_identity_caches(client, self.identity) == 3


def test_get_item(fake_client: FakeCacheClient) -> None:
    item = key_mutator.get_item(fake_client, "users", "5")
    assert item.found
    assert item.value == "O:8:stdClass"
    assert item.full_key == "users:5"
    assert not key_mutator.get_item(fake_client, "users", "6").found
