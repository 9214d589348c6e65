# core/keymap_decoder.py
"""
Rebuild the (site, group) -> keys hierarchy from flat memcached key names.

Keys written by the owning object cache look like

    [salt:]group:key...           global group
    [salt:]site_id:group:key...   group scoped to one site

Known limitation: any key whose first logical segment is all digits is read
as site-scoped, so a global group literally named "404" is indistinguishable
from site 404.
"""
import re
from typing import Dict, Iterable, Optional, Set

from core.entities import DecodedKeyRef, GroupEntry, GroupId, Keymap
from util.constants import KEY_SEP
from util.types import GLOBAL_SITE, RawKey, SiteFilter

_SITE_ID = re.compile(r"[0-9]+")


def decode_key(raw: RawKey, salt_offset: int = 0) -> Optional[DecodedKeyRef]:
    """
    Split one raw key into (site_scope, group, short_key).
    Returns None for protocol noise: empty keys, keys without a separator,
    and salted keys with fewer than two segments after the salt.
    """
    if not raw or KEY_SEP not in raw:
        return None

    parts = raw.split(KEY_SEP)
    if salt_offset > 0:
        parts = parts[salt_offset:]
        if len(parts) < 2:
            return None

    if _SITE_ID.fullmatch(parts[0]):
        site_scope = int(parts[0])
        group = parts[1]
        rest = parts[2:]
    else:
        site_scope = GLOBAL_SITE
        group = parts[0]
        rest = parts[1:]

    if len(parts) == 1:
        short_key = parts[0]
    else:
        # [site, group] with nothing after it leaves an empty short key
        short_key = KEY_SEP.join(rest)

    return DecodedKeyRef(
        site_scope=site_scope, group=group, short_key=short_key, raw=raw
    )


def in_scope(ref: DecodedKeyRef, site_filter: SiteFilter) -> bool:
    """Global keys always pass; scoped keys only for the filtered site."""
    if site_filter is None or ref.is_global:
        return True
    return ref.site_scope == site_filter


def decode_keymap(
    raw_keys: Iterable[RawKey], salt_offset: int = 0, site_filter: SiteFilter = None
) -> Keymap:
    """
    Decode every raw key and aggregate into a Keymap.
    - Keys keep discovery order inside their group; a raw key seen twice
      (e.g. listed by two slabs) is counted once.
    - representative_raw is the first raw key seen for the group.
    - Pure: the same input always yields an equal Keymap.
    """
    entries: Dict[GroupId, GroupEntry] = {}
    seen: Set[RawKey] = set()
    for raw in raw_keys:
        if raw in seen:
            continue
        seen.add(raw)
        ref = decode_key(raw, salt_offset)
        if ref is None or not in_scope(ref, site_filter):
            continue

        group_id = (ref.site_scope, ref.group)
        entry = entries.get(group_id)
        if entry is None:
            entry = GroupEntry(
                site_scope=ref.site_scope,
                group=ref.group,
                representative_raw=ref.raw,
            )
            entries[group_id] = entry
        entry.keys.append(ref.short_key)

    return Keymap(entries)


def filter_keymap(keymap: Keymap, term: str) -> Keymap:
    """
    Narrow a keymap to what matches `term` (case-insensitive substring).
    A matching group keeps all its keys; otherwise only matching keys survive
    and groups left empty are dropped. The input keymap is not modified.
    """
    needle = (term or "").strip().lower()
    if not needle:
        return keymap

    out: Dict[GroupId, GroupEntry] = {}
    for entry in keymap.sorted_entries():
        if needle in entry.group.lower():
            keys = list(entry.keys)
        else:
            keys = [k for k in entry.keys if needle in k.lower()]
        if not keys:
            continue
        out[(entry.site_scope, entry.group)] = GroupEntry(
            site_scope=entry.site_scope,
            group=entry.group,
            representative_raw=entry.representative_raw,
            keys=keys,
        )
    return Keymap(out)
