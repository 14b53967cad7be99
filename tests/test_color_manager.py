import pytest

from OverviewColors.color_manager import (
    ColorResolver,
    djb2,
    get_color,
    hash_identity,
    hash_to_color,
    hsl_to_color,
    normalize_hex,
    parse_hex_color,
    resolve,
)
from OverviewColors.Models import Color, MatchResult, Rule, WindowInfo
from OverviewColors.window_rules import RuleMatcher

IDENTITIES = ["", "a", "term", "My Project", "code:My Project", "ünïcödé", "😀 emoji", "x" * 500]


def reference_djb2(value):
    h = 5381
    for ch in value:
        h = (h * 33 + ord(ch)) % 2 ** 32
    return h


class TestHashing:
    def test_known_values(self):
        assert djb2("") == 5381
        assert djb2("a") == 177670
        assert hash_identity("") == 341
        assert hash_identity("a") == 190

    def test_wraps_to_unsigned_32_bit(self):
        value = "a fairly long window identity that overflows 32 bits" * 4
        assert djb2(value) == reference_djb2(value)
        assert 0 <= djb2(value) < 2 ** 32

    def test_hashes_utf16_code_units(self):
        # U+1F600 is the surrogate pair D83D DE00
        expected = ((5381 * 33 + 0xD83D) * 33 + 0xDE00) % 2 ** 32
        assert djb2("😀") == expected

    @pytest.mark.parametrize("identity", IDENTITIES)
    def test_hue_range_and_determinism(self, identity):
        hue = hash_identity(identity)
        assert 0 <= hue < 360
        assert hash_identity(identity) == hue

    @pytest.mark.parametrize("identity", IDENTITIES)
    def test_channels_are_bytes(self, identity):
        color = hash_to_color(identity)
        for channel in (color.r, color.g, color.b):
            assert isinstance(channel, int)
            assert 0 <= channel <= 255


class TestHslToColor:
    def test_primary_hues(self):
        assert hsl_to_color(0) == Color(215, 66, 66)
        assert hsl_to_color(120) == Color(66, 215, 66)
        assert hsl_to_color(240) == Color(66, 66, 215)

    def test_hash_color_of_empty_identity(self):
        assert hash_to_color("") == Color(215, 66, 113)

    def test_extremes(self):
        assert hsl_to_color(0, 0.0, 0.0) == Color(0, 0, 0)
        assert hsl_to_color(0, 0.0, 1.0) == Color(255, 255, 255)
        assert hsl_to_color(359.9, 1.0, 0.5).r == 255


class TestParseHexColor:
    def test_valid(self):
        assert parse_hex_color("#e84040") == Color(232, 64, 64)
        assert parse_hex_color("#E84040") == Color(232, 64, 64)

    @pytest.mark.parametrize("value", [
        "not-a-color", "#ZZZZZZ", "#123", "#11223344", "e84040", "#e8404", " #e84040", "#e84040\n", "", None, 0xe84040,
    ])
    def test_invalid_returns_none(self, value):
        assert parse_hex_color(value) is None

    def test_normalize_hex(self):
        assert normalize_hex("#E84040") == "#e84040"
        assert normalize_hex("#abc") is None
        assert normalize_hex(None) is None

    def test_color_to_hex(self):
        assert Color(17, 34, 51).to_hex() == "#112233"
        assert str(Color(0, 0, 255)) == "#0000ff"


class TestColorResolver:
    def test_override_wins(self):
        match = MatchResult(identity="X", wm_class="Y")
        assert resolve(match, {"Y:X": "#112233"}) == Color(17, 34, 51)

    def test_hash_color_without_override(self):
        match = MatchResult(identity="X", wm_class="Y")
        assert ColorResolver().resolve(match) == hash_to_color("X")
        assert resolve(match, {}) == hash_to_color("X")

    def test_override_key_uses_class_and_identity(self):
        match = MatchResult(identity="X", wm_class="Y")
        assert resolve(match, {"Z:X": "#112233"}) == hash_to_color("X")

    def test_invalid_override_is_ignored(self):
        match = MatchResult(identity="X", wm_class="Y")
        resolver = ColorResolver({"Y:X": "#GGGGGG", "Y:Z": "#123"})
        assert len(resolver) == 0
        assert resolver.resolve(match) == hash_to_color("X")

    def test_resolve_is_idempotent(self):
        match = MatchResult(identity="My Project", wm_class="code")
        resolver = ColorResolver({"code:Other": "#000000"})
        assert resolver.resolve(match) == resolver.resolve(match)

    def test_overrides_are_snapshotted(self):
        overrides = {"Y:X": "#112233"}
        resolver = ColorResolver(overrides)
        overrides["Y:X"] = "#ffffff"
        del overrides["Y:X"]
        assert resolver.resolve(MatchResult(identity="X", wm_class="Y")) == Color(17, 34, 51)

    def test_color_for_reports_source(self):
        resolver = ColorResolver({"Y:X": "#112233"})

        overridden = resolver.color_for(MatchResult(identity="X", wm_class="Y"))
        assert overridden.overridden
        assert overridden.override_key == "Y:X"

        hashed = resolver.color_for(MatchResult(identity="W", wm_class="Y"))
        assert not hashed.overridden
        assert hashed.color == hash_to_color("W")


class TestGetColor:
    def test_matched_window(self):
        matcher = RuleMatcher([Rule(wm_class="^code$", title_pattern="— (.+?) —")])
        resolver = ColorResolver({"code:My Project": "#e84040"})

        result = get_color(WindowInfo(wm_class="code", title="a — My Project — Code"), matcher, resolver)

        assert result.identity == "My Project"
        assert result.wm_class == "code"
        assert result.color == Color(232, 64, 64)

    def test_unclassified_window(self):
        matcher = RuleMatcher([Rule(wm_class="^code$", title_pattern="")])
        assert get_color(WindowInfo(wm_class="firefox", title="x"), matcher, ColorResolver()) is None
