"""Rule evaluation shared by every permission kind.

Two evaluation styles exist:

* single-identifier (navigation, component): :func:`select_rules` walks the
  rules once, in order. A matching exclusion discards everything matched so
  far; a later allow can still match again.
* list (menu, dropdown, list families): :func:`select_by_identifier` only
  filters, then :func:`accumulate_items` adds allowed items and subtracts
  excluded ones item by item.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, TypeVar

from .rules import Rule

T = TypeVar("T")


def rule_applies(rule: Rule, identifier: str, action: Optional[str] = None) -> bool:
    if not rule.pattern.matches(identifier):
        return False
    if action is None:
        return True
    return rule.actions is not None and action in rule.actions


def select_rules(rules: Iterable[Rule], identifier: str, action: Optional[str] = None) -> List[Rule]:
    """Return the rules that grant *identifier* (and *action*, when given)."""
    matched: List[Rule] = []
    for rule in rules:
        if not rule_applies(rule, identifier, action):
            continue
        if rule.exclude:
            matched = []
            continue
        matched.append(rule)
    return matched


def select_by_identifier(rules: Iterable[Rule], identifier: str) -> List[Rule]:
    return [rule for rule in rules if rule.pattern.matches(identifier)]


def accumulate_items(rules: Iterable[Rule], requested: Sequence[str]) -> List[str]:
    """Apply list rules to *requested*, in rule order.

    An allow rule adds each requested item its ``items`` match (once); an
    exclusion removes every accumulated item its ``items`` match.
    """
    accessible: List[str] = []
    for rule in rules:
        item_matcher = rule.items
        if item_matcher is None:
            continue
        for item in requested:
            if not item_matcher.matches(item):
                continue
            if rule.exclude:
                accessible = [x for x in accessible if not item_matcher.matches(x)]
            elif item not in accessible:
                accessible.append(item)
    return accessible


def merge_unique(first: Iterable[T], second: Iterable[T]) -> List[T]:
    """Union of both sequences, duplicates dropped, first-seen order kept."""
    out: List[T] = []
    for value in (*first, *second):
        if value not in out:
            out.append(value)
    return out


def shared_members(first: Iterable[T], second: Iterable[T]) -> List[T]:
    """Members of *first* that also appear in *second*, in *first*'s order."""
    keep = list(second)
    return [value for value in first if value in keep]


__all__ = [
    "rule_applies",
    "select_rules",
    "select_by_identifier",
    "accumulate_items",
    "merge_unique",
    "shared_members",
]
