from typing import Final


class InternalURIs:
    API = "/api"
    V1 = API + "/v1"
    SERVERS = V1 + "/servers"
    SERVER_KEYMAP = SERVERS + "/{host}/keymap"
    FLUSH_GROUPS = V1 + "/groups/flush"
    REMOVE_GROUP_KEYS = V1 + "/groups/keys/remove"
    REMOVE_KEY = V1 + "/keys/remove"
    GET_ITEM = V1 + "/keys/item"
    CLEAR_USER = V1 + "/users/clear"


KEY_SEP: Final[str] = ":"
DEFAULT_MEMCACHED_PORT: Final[int] = 11211

# Global groups holding a user's cached identity, paired with the identity
# attribute each one is keyed by.
USER_CACHE_GROUPS: Final[tuple[tuple[str, str], ...]] = (
    ("users", "numeric_id"),
    ("user_meta", "numeric_id"),
    ("userlogins", "login_name"),
    ("userslugs", "normalized_name"),
    ("useremail", "email"),
)
