"""
Helpers shared by the matcher, the resolver and the command line front end.

Override keys have the form ``"<wm_class>:<identity>"``. They are persisted as
mapping keys in the configuration file, so the format must stay stable.
"""
import re
from typing import Optional, Tuple

# Named colors offered for manual overrides
PALETTE = (
    ("Red", "#e84040"),
    ("Orange", "#e88830"),
    ("Yellow", "#d4c030"),
    ("Green", "#40b840"),
    ("Teal", "#30b8a0"),
    ("Cyan", "#30b0e0"),
    ("Blue", "#4070e0"),
    ("Purple", "#8050d0"),
    ("Magenta", "#c040b0"),
    ("Pink", "#e06088"),
)

_REGEX_SPECIAL_RE = re.compile(r"[.*+?^${}()|\[\]\\]")


def make_override_key(wm_class: str, identity: str) -> str:
    """Build the override table key for a class/identity pair."""
    return f"{wm_class}:{identity}"


def split_override_key(key: str) -> Optional[Tuple[str, str]]:
    """
    Split an override key back into ``(wm_class, identity)``.

    The split happens on the first colon, so identities may contain colons.

    :param key: Override key
    :return: Tuple of class and identity, or None if the key is malformed
    """
    wm_class, sep, identity = key.partition(":")
    if not sep or not wm_class:
        return None
    return wm_class, identity


def escape_regex_literal(value: str) -> str:
    """Escape regex metacharacters so ``value`` matches itself literally."""
    return _REGEX_SPECIAL_RE.sub(lambda m: "\\" + m.group(0), value)


def palette_hex(label: str) -> Optional[str]:
    """Look up a palette color by label (case-insensitive)."""
    wanted = label.strip().lower()
    for name, hex_value in PALETTE:
        if name.lower() == wanted:
            return hex_value
    return None
