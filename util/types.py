# util/types.py
from typing import Optional

# Flow: Narrow aliases shared by core and service layers.
RawKey = str
SlabId = int

# Site id to keep alongside global groups; None keeps every site.
SiteFilter = Optional[int]

GLOBAL_SITE: int = 0
ALL_SITES: SiteFilter = None
