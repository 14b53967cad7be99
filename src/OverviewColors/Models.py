"""
Data models for window color matching.

This module contains the dataclass definitions shared by the rule matcher,
the color resolver and the configuration loader.
"""

from dataclasses import dataclass
from typing import Optional

from .shared import make_override_key


@dataclass(frozen=True)
class Rule:
    """
    A user-authored window matching rule.

    Attributes:
        wm_class: Regex tested case-insensitively against the window class
        title_pattern: Regex tested against the window title ("" matches any title)
    """
    wm_class: str
    title_pattern: str = ""

    def to_dict(self) -> dict:
        return {'wm_class': self.wm_class, 'title_pattern': self.title_pattern}


@dataclass
class WindowInfo:
    """
    Information about a window to be classified.

    Attributes:
        wm_class: The window class identifier (WM_CLASS or app id)
        title: The window title
    """
    wm_class: Optional[str]
    title: Optional[str]

    def is_valid(self) -> bool:
        """Both a class and a title are needed to extract an identity."""
        return bool(self.wm_class) and bool(self.title)


@dataclass(frozen=True)
class MatchResult:
    """
    Outcome of a successful rule match.

    Attributes:
        identity: Capture group, full title match, or the class id itself
        wm_class: The class id of the matched window
    """
    identity: str
    wm_class: str

    @property
    def override_key(self) -> str:
        return make_override_key(self.wm_class, self.identity)


@dataclass(frozen=True)
class Color:
    """An RGB color with integer channels in [0, 255]."""
    r: int
    g: int
    b: int

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def __str__(self) -> str:
        return self.to_hex()


@dataclass(frozen=True)
class WindowColor:
    """
    A resolved color together with the match it was derived from.

    Attributes:
        color: The resolved color
        identity: Identity extracted by the matching rule
        wm_class: Class id of the window
        overridden: True if the color came from the override table
    """
    color: Color
    identity: str
    wm_class: str
    overridden: bool = False

    @property
    def override_key(self) -> str:
        return make_override_key(self.wm_class, self.identity)
