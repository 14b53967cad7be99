"""
Window matching rules and rule matcher.

This module compiles an ordered list of rules once and classifies windows
against them, extracting the identity string that decides a window's color.
"""
import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern, Tuple

from .Models import MatchResult, Rule, WindowInfo
from .shared import escape_regex_literal

logger = logging.getLogger(__name__)


def _compile(source: str, flags: int = 0) -> Optional[Pattern]:
    try:
        return re.compile(source, flags)
    except (re.error, OverflowError) as e:
        logger.warning(f"Ignoring invalid regex {source!r}: {e}")
        return None


@dataclass(frozen=True)
class CompiledRule:
    """
    A rule with its patterns compiled.

    Attributes:
        rule: The source rule
        class_pattern: Compiled class regex, None if it failed to compile
        title_pattern: Compiled title regex, None if empty or failed to compile
        match_any_title: True if the source title pattern was empty
    """
    rule: Rule
    class_pattern: Optional[Pattern]
    title_pattern: Optional[Pattern]
    match_any_title: bool

    @classmethod
    def from_rule(cls, rule: Rule) -> "CompiledRule":
        if not isinstance(rule.wm_class, str) or not isinstance(rule.title_pattern, str):
            raise TypeError("Rule patterns must be strings")

        match_any_title = rule.title_pattern == ""
        title_pattern = None
        if not match_any_title:
            title_pattern = _compile(rule.title_pattern)

        return cls(
            rule=rule,
            class_pattern=_compile(rule.wm_class, re.IGNORECASE),
            title_pattern=title_pattern,
            match_any_title=match_any_title,
        )

    @property
    def is_inert(self) -> bool:
        """Whether a broken pattern keeps this rule from ever matching."""
        if self.class_pattern is None:
            return True
        return not self.match_any_title and self.title_pattern is None

    def match(self, wm_class: str, title: str) -> Optional[MatchResult]:
        """
        Match a single window against this rule.

        Args:
            wm_class: Window class id (non-empty)
            title: Window title (non-empty)

        Returns:
            MatchResult if the rule matches, None otherwise
        """
        if self.class_pattern is None or not self.class_pattern.search(wm_class):
            return None

        if self.match_any_title:
            return MatchResult(identity=wm_class, wm_class=wm_class)

        if self.title_pattern is None:
            return None

        m = self.title_pattern.search(title)
        if m is None:
            return None

        # First capture group if it took part in the match, else the whole match
        identity = m.group(0)
        if self.title_pattern.groups and m.group(1) is not None:
            identity = m.group(1)
        return MatchResult(identity=identity, wm_class=wm_class)


class RuleMatcher:
    """
    Classifies windows against an ordered list of rules.

    Rules are checked in the order given and the first matching rule wins,
    regardless of how specific later rules are. The compiled rule table is
    fixed at construction; build a new matcher when the rules change.
    """

    def __init__(self, rules: Iterable[Rule] = ()):
        self._rules: Tuple[CompiledRule, ...] = tuple(
            CompiledRule.from_rule(rule) for rule in rules
        )
        inert = len(self.inert_rules())
        if inert:
            logger.debug(f"Compiled {len(self._rules)} rules ({inert} inert)")
        else:
            logger.debug(f"Compiled {len(self._rules)} rules")

    def __len__(self) -> int:
        return len(self._rules)

    @property
    def rules(self) -> Tuple[Rule, ...]:
        return tuple(compiled.rule for compiled in self._rules)

    def inert_rules(self) -> List[Rule]:
        """Rules that can never match because one of their patterns is broken."""
        return [compiled.rule for compiled in self._rules if compiled.is_inert]

    def match(self, window: WindowInfo) -> Optional[MatchResult]:
        """
        Find the identity of a window.

        Args:
            window: Window to classify

        Returns:
            MatchResult of the first matching rule, or None for an
            unclassified window (no class, no title, or no matching rule)
        """
        if not window.is_valid():
            return None

        for compiled in self._rules:
            result = compiled.match(window.wm_class, window.title)
            if result is not None:
                logger.debug(
                    f"Rule {compiled.rule.wm_class!r} matched window '{window.title}' "
                    f"(class: {window.wm_class}) -> identity '{result.identity}'"
                )
                return result
        return None


def suggest_rule(window: WindowInfo) -> Rule:
    """
    Build a prefilled rule for an unclassified window.

    The class is matched literally and the whole title becomes the single
    capture group, so the suggestion matches exactly this window.

    :param window: Window to build the rule for
    :return: Suggested rule
    """
    wm_class = window.wm_class or ""
    title = window.title or ""
    return Rule(
        wm_class=escape_regex_literal(wm_class),
        title_pattern=f"({escape_regex_literal(title)})",
    )
