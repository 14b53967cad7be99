"""
Configuration loader for Overview Colors.
Loads matching rules and color overrides from a YAML configuration file.

Expected YAML structure:
overview_colors:
  settings:
    debug_logs: false                # Verbose matcher logging, default: false
  rules:                             # Ordered, first match wins
    - wm_class: "^code$"             # Case-insensitive regex on the window class
      title_pattern: "— (.+?) —"     # Regex on the title, "" matches any title
  color_overrides:
    "code:My Project": "#e84040"     # "<wm_class>:<identity>" -> "#rrggbb"
"""
import logging
import os

import yaml

from .color_manager import ColorResolver, normalize_hex
from .log import set_debug_enabled
from .Models import Rule
from .window_rules import CompiledRule, RuleMatcher

ROOT_KEY = 'overview_colors'


class ConfigValidationError(Exception):
    """Exception raised when configuration validation fails."""


def default_config_path():
    """Path of the per-user configuration file."""
    config_home = os.environ.get('XDG_CONFIG_HOME') or os.path.expanduser('~/.config')
    return os.path.join(config_home, 'overview-colors', 'config.yml')


class ConfigLoader:
    """Load, validate and edit the Overview Colors configuration file."""

    def __init__(self, config_path, force_debug=False):
        """
        Initialize the configuration loader.

        :param config_path: Path to the YAML configuration file
        :param force_debug: Enable debug logging regardless of the debug_logs setting
        """
        self.config_path = config_path
        self.config = None
        self.rules = []  # Ordered list of Rule
        self.overrides = {}  # "wm_class:identity" -> "#rrggbb"
        self.debug_logs = False
        self.force_debug = force_debug
        self.logger = logging.getLogger(__name__)

    def load(self, allow_missing=False):
        """
        Load and parse the YAML configuration file.

        :param allow_missing: Start from an empty configuration if the file doesn't exist
        :raises ConfigValidationError: If configuration is invalid
        :raises FileNotFoundError: If config file doesn't exist and allow_missing is False
        """
        if self.force_debug:
            set_debug_enabled(True)

        if not os.path.exists(self.config_path):
            if not allow_missing:
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
            self.logger.debug(f"No configuration at {self.config_path}, starting empty")
            self.config = {}
            self._apply_config()
            return

        with open(self.config_path, 'r', encoding='utf-8') as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigValidationError(f"Configuration file is not valid YAML: {e}") from e

        if not data:
            raise ConfigValidationError("Configuration file is empty")

        if not isinstance(data, dict) or ROOT_KEY not in data:
            raise ConfigValidationError(f"Configuration must contain '{ROOT_KEY}' root element")

        self.config = data[ROOT_KEY] or {}
        if not isinstance(self.config, dict):
            raise ConfigValidationError(f"'{ROOT_KEY}' must be a dictionary")

        self._validate_config()
        self._apply_config()

    def _validate_config(self):
        """
        Validate the configuration structure.

        Only the container types are enforced here; malformed individual
        rules and overrides are dropped while sanitizing.

        :raises ConfigValidationError: If validation fails
        """
        if 'settings' in self.config:
            self._validate_settings()

        if self.config.get('rules') is not None and not isinstance(self.config['rules'], list):
            raise ConfigValidationError("'rules' must be a list")

        overrides = self.config.get('color_overrides')
        if overrides is not None and not isinstance(overrides, dict):
            raise ConfigValidationError("'color_overrides' must be a dictionary")

    def _validate_settings(self):
        """Validate settings section."""
        settings = self.config['settings'] or {}

        if not isinstance(settings, dict):
            raise ConfigValidationError("'settings' must be a dictionary")

        if 'debug_logs' in settings and not isinstance(settings['debug_logs'], bool):
            raise ConfigValidationError("debug_logs must be true or false")

    def _apply_config(self):
        settings = self.config.get('settings') or {}
        self.debug_logs = settings.get('debug_logs', False)
        set_debug_enabled(self.debug_logs or self.force_debug)

        self.rules = self._sanitize_rules(self.config.get('rules') or [])
        self.overrides = self._sanitize_overrides(self.config.get('color_overrides') or {})
        self.logger.info(f"Loaded {len(self.rules)} rules and {len(self.overrides)} color overrides")

    def _sanitize_rules(self, rules_config):
        """
        Convert rule entries into Rule objects.

        Entries that are not mappings with string 'wm_class' and
        'title_pattern' fields are dropped. Invalid regexes are kept; the
        matcher treats them as inert.
        """
        rules = []
        for i, rule_def in enumerate(rules_config):
            if not isinstance(rule_def, dict):
                self.logger.warning(f"Rule at index {i} must be a dictionary, ignoring")
                continue

            wm_class = rule_def.get('wm_class')
            title_pattern = rule_def.get('title_pattern')

            if not isinstance(wm_class, str) or not isinstance(title_pattern, str):
                self.logger.warning(
                    f"Rule at index {i}: 'wm_class' and 'title_pattern' must be strings, ignoring"
                )
                continue

            rules.append(Rule(wm_class=wm_class, title_pattern=title_pattern))
        return rules

    def _sanitize_overrides(self, overrides_config):
        """Keep overrides with a non-empty string key and a valid hex color."""
        overrides = {}
        for key, hex_value in overrides_config.items():
            normalized = normalize_hex(hex_value)
            if not isinstance(key, str) or not key:
                self.logger.warning(f"Ignoring color override with invalid key: {key!r}")
                continue
            if normalized is None:
                self.logger.warning(f"Ignoring color override '{key}': invalid color {hex_value!r}")
                continue
            overrides[key] = normalized
        return overrides

    def build_matcher(self):
        """Create a RuleMatcher for the current rules."""
        return RuleMatcher(self.rules)

    def build_resolver(self):
        """Create a ColorResolver for the current overrides."""
        return ColorResolver(self.overrides)

    def add_rule(self, rule):
        """
        Append a rule and save.

        :param rule: Rule to append (checked last)
        """
        self._check_rule(rule)
        self.rules.append(rule)
        self.save()

    def update_rule(self, index, rule):
        """
        Replace the rule at ``index`` and save. The rule keeps its position.

        :raises IndexError: If there is no rule at that index
        """
        self._check_rule(rule)
        previous = self.rules[index]
        self.rules[index] = rule
        self.save()
        return previous

    def _check_rule(self, rule):
        """Reject non-string patterns and warn about rules that can never match."""
        if CompiledRule.from_rule(rule).is_inert:
            self.logger.warning(
                f"Rule wm_class={rule.wm_class!r} title_pattern={rule.title_pattern!r} "
                f"has an invalid regex and will never match"
            )

    def remove_rule(self, index):
        """
        Remove the rule at ``index`` and save.

        :raises IndexError: If there is no rule at that index
        """
        rule = self.rules.pop(index)
        self.save()
        return rule

    def set_override(self, key, hex_value):
        """
        Assign a manual color to an override key and save.

        Invalid colors and empty keys are ignored.

        :return: True if the override was stored
        """
        normalized = normalize_hex(hex_value)
        if not normalized or not key:
            self.logger.warning(f"Not setting override {key!r} to invalid color {hex_value!r}")
            return False
        self.overrides[key] = normalized
        self.save()
        return True

    def clear_override(self, key):
        """
        Remove the override for ``key`` and save.

        :return: True if an override was removed
        """
        if key not in self.overrides:
            return False
        del self.overrides[key]
        self.save()
        return True

    def clear_all_overrides(self):
        self.overrides = {}
        self.save()

    def save(self):
        """Write the current settings, rules and overrides back to the configuration file."""
        if self.config is None:
            self.config = {}

        settings = dict(self.config.get('settings') or {})
        settings['debug_logs'] = self.debug_logs
        self.config['settings'] = settings
        self.config['rules'] = [rule.to_dict() for rule in self.rules]
        self.config['color_overrides'] = dict(self.overrides)

        config_dir = os.path.dirname(os.path.abspath(self.config_path))
        os.makedirs(config_dir, exist_ok=True)

        with open(self.config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump({ROOT_KEY: self.config}, f, sort_keys=False, allow_unicode=True)
        self.logger.debug(f"Saved configuration to {self.config_path}")
