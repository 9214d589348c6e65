# core/key_enumerator.py
from typing import List
import logging

from core.cache_client import CacheClient
from core.entities import ServerEndpoint
from util.timing import timed
from util.types import RawKey

logger = logging.getLogger(__name__)


def enumerate_keys(client: CacheClient, endpoint: ServerEndpoint) -> List[RawKey]:
    """
    Every key stored on `endpoint`, slab by slab, in slab-list then dump order.
    - Duplicates across slabs are kept as-is.
    - Slab id 0 / empty ids are skipped.
    - CacheConnectionError propagates; no partial list is returned.
    """
    keys: List[RawKey] = []
    with timed(logger, "keys.enumerate", server=endpoint) as fields:
        slabs = client.list_slabs(endpoint)
        for slab_id in slabs:
            if not slab_id:
                continue
            keys.extend(client.dump_keys(endpoint, slab_id))
        fields["slabs"] = len(slabs)
        fields["keys"] = len(keys)
    return keys
