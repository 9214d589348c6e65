# util/functions.py
import re

_UNSAFE_KEY_CHARS = re.compile(r"[^a-z0-9:_\-]")


def sanitize_key(value: str) -> str:
    """
    - Strip every character outside [a-z0-9:_-] from a group or key fragment.
    - Uppercase letters are removed, not lowered. An empty result is valid.
    """
    return _UNSAFE_KEY_CHARS.sub("", value or "")


def cleared_message(count: int, target: str) -> str:
    return f"Cleared {count} keys from {target} group(s)."
