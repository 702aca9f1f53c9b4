from __future__ import annotations

import fnmatch
import re
from typing import Any, Mapping, Optional, Union

from .errors import PatternError

PatternLike = Union[str, "re.Pattern[str]", "Matcher", Mapping[str, str]]


class Matcher:
    """Exact-string or regular-expression test against a single candidate.

    A plain ``str`` compares by equality. A compiled regex is tested with
    search semantics, so ``re.compile("^/admin")`` matches ``"/admin/users"``
    and the expression itself decides how it is anchored.
    """

    __slots__ = ("source", "_regex")

    def __init__(self, pattern: Union[str, "re.Pattern[str]"]) -> None:
        if isinstance(pattern, re.Pattern):
            self._regex: Optional["re.Pattern[str]"] = pattern
            self.source = pattern.pattern
        elif isinstance(pattern, str):
            self._regex = None
            self.source = pattern
        else:
            raise PatternError(f"unsupported pattern type: {type(pattern).__name__}")

    @property
    def is_regex(self) -> bool:
        return self._regex is not None

    def matches(self, candidate: str) -> bool:
        if self._regex is not None:
            return self._regex.search(candidate) is not None
        return candidate == self.source

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matcher):
            return NotImplemented
        return (self.source, self.is_regex) == (other.source, other.is_regex)

    def __hash__(self) -> int:
        return hash((self.source, self.is_regex))

    def __repr__(self) -> str:
        if self._regex is not None:
            return f"Matcher(re.compile({self.source!r}))"
        return f"Matcher({self.source!r})"


class ItemMatcher:
    """Matches list items against an exact set of strings or one pattern."""

    __slots__ = ("_items", "_matcher")

    def __init__(self, items: Optional[frozenset[str]] = None, matcher: Optional[Matcher] = None):
        if (items is None) == (matcher is None):
            raise PatternError("ItemMatcher needs exactly one of items or matcher")
        self._items = items
        self._matcher = matcher

    def matches(self, candidate: str) -> bool:
        if self._items is not None:
            return candidate in self._items
        assert self._matcher is not None
        return self._matcher.matches(candidate)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ItemMatcher):
            return NotImplemented
        return (self._items, self._matcher) == (other._items, other._matcher)

    def __hash__(self) -> int:
        return hash((self._items, self._matcher))

    def __repr__(self) -> str:
        if self._items is not None:
            return f"ItemMatcher({sorted(self._items)!r})"
        return f"ItemMatcher({self._matcher!r})"


def _compile(expr: str, kind: str) -> "re.Pattern[str]":
    try:
        return re.compile(expr)
    except re.error as e:
        raise PatternError(f"invalid {kind} pattern {expr!r}: {e}") from e


def glob(expr: str) -> "re.Pattern[str]":
    """Compile a shell-style wildcard (``admin/*``) into an anchored regex."""
    return _compile(r"\A(?:" + fnmatch.translate(expr) + ")", "glob")


def regex(expr: str) -> "re.Pattern[str]":
    """Compile *expr*, reporting bad syntax as :class:`PatternError`."""
    return _compile(expr, "regex")


def compile_pattern(spec: Any) -> Matcher:
    """Turn a pattern specification into a :class:`Matcher`.

    Accepted forms:
      - ``"exact"``                 exact string
      - ``re.compile("...")``       regular expression
      - ``{"regex": "..."}``        regular expression given as text
      - ``{"glob": "admin/*"}``     shell-style wildcard
      - an existing ``Matcher``
    """
    if isinstance(spec, Matcher):
        return spec
    if isinstance(spec, (str, re.Pattern)):
        return Matcher(spec)
    if isinstance(spec, Mapping):
        if len(spec) != 1:
            raise PatternError(f"pattern mapping must have exactly one key, got {sorted(spec)!r}")
        ((key, value),) = spec.items()
        if not isinstance(value, str):
            raise PatternError(f"pattern value for {key!r} must be a string")
        if key == "regex":
            return Matcher(regex(value))
        if key == "glob":
            return Matcher(glob(value))
        raise PatternError(f"unknown pattern key {key!r}; expected 'regex' or 'glob'")
    raise PatternError(f"unsupported pattern type: {type(spec).__name__}")


def compile_items(spec: Any) -> ItemMatcher:
    """Build the item matcher of a list rule.

    A list, tuple or set of strings is an exact set; anything else is read as
    a single pattern (see :func:`compile_pattern`).
    """
    if isinstance(spec, ItemMatcher):
        return spec
    if isinstance(spec, (list, tuple, set, frozenset)):
        items = list(spec)
        for item in items:
            if not isinstance(item, str):
                raise PatternError(f"list items must be strings, got {type(item).__name__}")
        return ItemMatcher(items=frozenset(items))
    return ItemMatcher(matcher=compile_pattern(spec))


def matches(pattern: Any, candidate: str) -> bool:
    """Return True when *candidate* matches *pattern* (any accepted form)."""
    return compile_pattern(pattern).matches(candidate)


__all__ = [
    "Matcher",
    "ItemMatcher",
    "PatternLike",
    "glob",
    "regex",
    "compile_pattern",
    "compile_items",
    "matches",
]
