#!/usr/bin/env python3
"""
Overview Colors command line front end.

Classifies windows against the configured rules and manages color overrides.
"""
import argparse
import dataclasses
import logging
import sys

from .color_manager import get_color, hash_identity, hash_to_color, normalize_hex
from .config_loader import ConfigLoader, ConfigValidationError, default_config_path
from .Models import Rule, WindowInfo
from .shared import PALETTE, palette_hex, split_override_key
from .window_rules import suggest_rule

logger = logging.getLogger(__name__)

# Commands that may create the configuration file
WRITE_COMMANDS = (
    'set-override', 'clear-override', 'clear-overrides', 'add-rule', 'edit-rule', 'remove-rule',
)


def build_parser():
    parser = argparse.ArgumentParser(
        prog='overview-colors',
        description='Deterministic window colors from regex rules.',
    )
    parser.add_argument('--config', default=None,
                        help=f"Configuration file (default: {default_config_path()})")
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')

    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('match', help='Classify a window and print its color (or a suggested rule if unclassified)')
    p.add_argument('wm_class')
    p.add_argument('title')

    p = sub.add_parser('color', help='Print the hash color of an identity')
    p.add_argument('identity')

    p = sub.add_parser('set-override', help='Assign a manual color to an override key')
    p.add_argument('key', help='"<wm_class>:<identity>"')
    p.add_argument('color', help='#rrggbb or a palette color name')

    p = sub.add_parser('clear-override', help='Remove a manual color')
    p.add_argument('key')

    sub.add_parser('clear-overrides', help='Remove all manual colors')

    p = sub.add_parser('add-rule', help='Append a matching rule')
    p.add_argument('wm_class')
    p.add_argument('title_pattern', nargs='?', default='')

    p = sub.add_parser('edit-rule', help='Change a rule in place')
    p.add_argument('index', type=int)
    p.add_argument('--wm-class', dest='wm_class', default=None)
    p.add_argument('--title-pattern', dest='title_pattern', default=None)

    p = sub.add_parser('remove-rule', help='Remove a rule')
    p.add_argument('index', type=int)

    sub.add_parser('rules', help='List the configured rules')
    sub.add_parser('overrides', help='List the manual colors')
    sub.add_parser('palette', help='List the override palette')
    return parser


def cmd_match(loader, args):
    window = WindowInfo(wm_class=args.wm_class, title=args.title)
    result = get_color(window, loader.build_matcher(), loader.build_resolver())
    if result is None:
        rule = suggest_rule(window)
        print("Unclassified window. Suggested rule:")
        print(f"  wm_class: {rule.wm_class}")
        print(f"  title_pattern: {rule.title_pattern}")
        return 0

    source = 'override' if result.overridden else 'hash'
    print(f"identity: {result.identity}")
    print(f"key: {result.override_key}")
    print(f"color: {result.color.to_hex()} ({source})")
    return 0


def cmd_color(loader, args):
    color = hash_to_color(args.identity)
    print(f"{color.to_hex()} (hue {hash_identity(args.identity)})")
    return 0


def cmd_set_override(loader, args):
    if split_override_key(args.key) is None:
        logger.error(f"Invalid override key '{args.key}', expected '<wm_class>:<identity>'")
        return 1

    hex_value = normalize_hex(args.color) or palette_hex(args.color)
    if hex_value is None:
        logger.error(f"Invalid color '{args.color}', expected #rrggbb or a palette name")
        return 1

    loader.set_override(args.key, hex_value)
    print(f"{args.key} -> {hex_value}")
    return 0


def cmd_clear_override(loader, args):
    if not loader.clear_override(args.key):
        logger.warning(f"No override for '{args.key}'")
        return 1
    return 0


def cmd_clear_overrides(loader, args):
    loader.clear_all_overrides()
    return 0


def cmd_add_rule(loader, args):
    loader.add_rule(Rule(wm_class=args.wm_class, title_pattern=args.title_pattern))
    print(f"Added rule {len(loader.rules) - 1}")
    return 0


def cmd_edit_rule(loader, args):
    if args.wm_class is None and args.title_pattern is None:
        logger.error("Nothing to change, pass --wm-class and/or --title-pattern")
        return 1
    try:
        current = loader.rules[args.index]
    except IndexError:
        logger.error(f"No rule at index {args.index}")
        return 1

    changes = {}
    if args.wm_class is not None:
        changes['wm_class'] = args.wm_class
    if args.title_pattern is not None:
        changes['title_pattern'] = args.title_pattern
    loader.update_rule(args.index, dataclasses.replace(current, **changes))
    print(f"Updated rule {args.index}")
    return 0


def cmd_remove_rule(loader, args):
    try:
        rule = loader.remove_rule(args.index)
    except IndexError:
        logger.error(f"No rule at index {args.index}")
        return 1
    print(f"Removed rule {args.index}: wm_class={rule.wm_class!r} title_pattern={rule.title_pattern!r}")
    return 0


def cmd_rules(loader, args):
    inert = set(id(rule) for rule in loader.build_matcher().inert_rules())
    for i, rule in enumerate(loader.rules):
        flag = ' (invalid regex, never matches)' if id(rule) in inert else ''
        print(f"{i}: wm_class={rule.wm_class!r} title_pattern={rule.title_pattern!r}{flag}")
    return 0


def cmd_overrides(loader, args):
    if not loader.overrides:
        print("No overrides set")
        return 0
    for key, hex_value in sorted(loader.overrides.items()):
        print(f"{hex_value} {key}")
    return 0


def cmd_palette(loader, args):
    for name, hex_value in PALETTE:
        print(f"{name:<8} {hex_value}")
    return 0


COMMANDS = {
    'match': cmd_match,
    'color': cmd_color,
    'set-override': cmd_set_override,
    'clear-override': cmd_clear_override,
    'clear-overrides': cmd_clear_overrides,
    'add-rule': cmd_add_rule,
    'edit-rule': cmd_edit_rule,
    'remove-rule': cmd_remove_rule,
    'rules': cmd_rules,
    'overrides': cmd_overrides,
    'palette': cmd_palette,
}


def main(argv=None):
    """Main application entry point."""
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
    args = build_parser().parse_args(argv)

    config_file = args.config or default_config_path()

    # Load configuration
    try:
        loader = ConfigLoader(config_file, force_debug=args.debug)
        loader.load(allow_missing=args.command in WRITE_COMMANDS or args.config is None)
    except FileNotFoundError as e:
        logger.error(f"{e}")
        return 1
    except ConfigValidationError as e:
        logger.error(f"Configuration Error: {e}")
        return 1

    return COMMANDS[args.command](loader, args)


if __name__ == '__main__':
    sys.exit(main())
