"""
Deterministic color assignment for matched windows.

Identities are hashed with djb2 onto a hue, which is turned into a color with
fixed saturation and lightness. Manual overrides keyed by
``"<wm_class>:<identity>"`` take precedence over the hash color.
"""
import logging
import math
import re
from typing import Dict, Mapping, Optional

from .Models import Color, MatchResult, WindowColor, WindowInfo
from .window_rules import RuleMatcher

logger = logging.getLogger(__name__)

SATURATION = 0.65
LIGHTNESS = 0.55

_HEX_COLOR_RE = re.compile(r"#[0-9a-fA-F]{6}")


def djb2(value: str) -> int:
    """
    Unsigned 32-bit djb2 hash over the UTF-16 code units of ``value``.

    Iterating code units rather than code points keeps hashes of characters
    outside the BMP identical to the JavaScript ``charCodeAt`` version.
    """
    data = value.encode("utf-16-le", "surrogatepass")
    h = 5381
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 33 + unit) & 0xFFFFFFFF
    return h


def hash_identity(identity: str) -> int:
    """Map an identity to a hue in [0, 360)."""
    return djb2(identity) % 360


def _round_channel(value: float) -> int:
    # Half-up rounding, like Math.round
    return min(255, max(0, math.floor(value * 255 + 0.5)))


def hsl_to_color(hue: float, saturation: float = SATURATION, lightness: float = LIGHTNESS) -> Color:
    """
    Convert an HSL color to RGB.

    :param hue: Hue in degrees, [0, 360)
    :param saturation: Saturation in [0, 1]
    :param lightness: Lightness in [0, 1]
    :return: Color with channels clamped to [0, 255]
    """
    c = (1 - abs(2 * lightness - 1)) * saturation
    x = c * (1 - abs((hue / 60) % 2 - 1))
    m = lightness - c / 2

    if hue < 60:
        r, g, b = c, x, 0.0
    elif hue < 120:
        r, g, b = x, c, 0.0
    elif hue < 180:
        r, g, b = 0.0, c, x
    elif hue < 240:
        r, g, b = 0.0, x, c
    elif hue < 300:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x

    return Color(_round_channel(r + m), _round_channel(g + m), _round_channel(b + m))


def hash_to_color(identity: str) -> Color:
    """The deterministic color of an identity."""
    return hsl_to_color(hash_identity(identity))


def parse_hex_color(value) -> Optional[Color]:
    """
    Parse a ``#rrggbb`` string.

    :param value: Candidate color string
    :return: Color, or None for any other shape (short forms, alpha, bad digits)
    """
    if not isinstance(value, str) or not _HEX_COLOR_RE.fullmatch(value):
        return None
    return Color(int(value[1:3], 16), int(value[3:5], 16), int(value[5:7], 16))


def normalize_hex(value) -> Optional[str]:
    """Return ``value`` as lowercase ``#rrggbb``, or None if it is not a valid color."""
    if parse_hex_color(value) is None:
        return None
    return value.lower()


class ColorResolver:
    """
    Resolves matched windows to colors.

    The override table is copied at construction and invalid entries are
    dropped, so the resolver never sees later edits to the mapping it was
    built from. Build a new resolver when overrides change.
    """

    def __init__(self, overrides: Optional[Mapping[str, str]] = None):
        self._overrides: Dict[str, Color] = {}
        for key, hex_value in (overrides or {}).items():
            color = parse_hex_color(hex_value)
            if color is None:
                logger.debug(f"Ignoring invalid override color for '{key}': {hex_value!r}")
                continue
            self._overrides[key] = color

    def __len__(self) -> int:
        return len(self._overrides)

    def override_for(self, match: MatchResult) -> Optional[Color]:
        return self._overrides.get(match.override_key)

    def resolve(self, match: MatchResult) -> Color:
        """
        Color for a match: the override if one exists, else the hash color.

        :param match: Result of RuleMatcher.match()
        :return: Resolved color
        """
        override = self.override_for(match)
        if override is not None:
            return override
        return hash_to_color(match.identity)

    def color_for(self, match: MatchResult) -> WindowColor:
        override = self.override_for(match)
        return WindowColor(
            color=override if override is not None else hash_to_color(match.identity),
            identity=match.identity,
            wm_class=match.wm_class,
            overridden=override is not None,
        )


def resolve(match: MatchResult, overrides: Mapping[str, str]) -> Color:
    """Resolve a single match against an override mapping."""
    return ColorResolver(overrides).resolve(match)


def get_color(window: WindowInfo, matcher: RuleMatcher, resolver: ColorResolver) -> Optional[WindowColor]:
    """
    Classify a window and resolve its color.

    :param window: Window to color
    :param matcher: Rule matcher built from the current rules
    :param resolver: Color resolver built from the current overrides
    :return: WindowColor, or None if the window is unclassified
    """
    match = matcher.match(window)
    if match is None:
        return None
    return resolver.color_for(match)
