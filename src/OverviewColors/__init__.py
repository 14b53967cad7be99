from .color_manager import ColorResolver, get_color, hash_to_color, parse_hex_color
from .config_loader import ConfigLoader, ConfigValidationError
from .Models import Color, MatchResult, Rule, WindowColor, WindowInfo
from .window_rules import RuleMatcher, suggest_rule

__all__ = [
    'Color', 'ColorResolver', 'ConfigLoader', 'ConfigValidationError', 'MatchResult',
    'Rule', 'RuleMatcher', 'WindowColor', 'WindowInfo', 'get_color', 'hash_to_color',
    'parse_hex_color', 'suggest_rule',
]
