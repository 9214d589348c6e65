from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from util.types import GLOBAL_SITE, RawKey


@dataclass(frozen=True)
class ServerEndpoint:
    host: str
    port: int

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class DecodedKeyRef:
    """
    One raw key split into its logical parts. site_scope 0 means global.
    """

    site_scope: int
    group: str
    short_key: str
    raw: RawKey

    @property
    def is_global(self) -> bool:
        return self.site_scope == GLOBAL_SITE


@dataclass
class GroupEntry:
    site_scope: int
    group: str
    representative_raw: RawKey  # first raw key seen for this group
    keys: List[str] = field(default_factory=list)  # discovery order

    @property
    def count(self) -> int:
        return len(self.keys)

    @property
    def qualified_group(self) -> str:
        """Group name as the cache layer expects it, with the site prefix when scoped."""
        if self.site_scope == GLOBAL_SITE:
            return self.group
        return f"{self.site_scope}:{self.group}"


GroupId = Tuple[int, str]


class Keymap:
    """
    (site_scope, group) -> GroupEntry, built once by the decoder.

    Iteration and sorted_entries() follow the composite order: site scope
    ascending (global first), then group name.
    """

    def __init__(self, entries: Optional[Dict[GroupId, GroupEntry]] = None) -> None:
        self._entries: Dict[GroupId, GroupEntry] = dict(entries or {})

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, group_id: object) -> bool:
        return group_id in self._entries

    def __iter__(self) -> Iterator[GroupEntry]:
        return iter(self.sorted_entries())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Keymap):
            return NotImplemented
        return self._entries == other._entries

    def get(self, site_scope: int, group: str) -> Optional[GroupEntry]:
        return self._entries.get((site_scope, group))

    def sorted_entries(self) -> List[GroupEntry]:
        return [self._entries[k] for k in sorted(self._entries)]

    @property
    def key_count(self) -> int:
        return sum(e.count for e in self._entries.values())


@dataclass(frozen=True)
class Identity:
    """A resolved user whose cached records should be dropped."""

    numeric_id: int
    login_name: str
    normalized_name: str
    email: str


@dataclass(frozen=True)
class CacheItem:
    group: str
    key: str
    full_key: str
    found: bool
    value: Optional[str] = None
