from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple, Union

from .matcher import ItemMatcher, Matcher, compile_items, compile_pattern


@dataclass(frozen=True)
class Rule:
    """One clause of a permission.

    Every kind uses the same shape and ignores the payload fields it does not
    need: ``actions`` is read by component permissions, ``items`` by list
    permissions and ``is_default`` by navigation permissions.

    Patterns are compiled on construction, so invalid regex syntax surfaces
    here rather than during a check.
    """

    pattern: Matcher
    exclude: bool = False
    is_default: bool = False
    actions: Optional[Tuple[str, ...]] = None
    items: Optional[ItemMatcher] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "pattern", compile_pattern(self.pattern))
        object.__setattr__(self, "exclude", bool(self.exclude))
        object.__setattr__(self, "is_default", bool(self.is_default))
        if self.actions is not None:
            acts = (self.actions,) if isinstance(self.actions, str) else tuple(self.actions)
            object.__setattr__(self, "actions", acts)
        if self.items is not None:
            object.__setattr__(self, "items", compile_items(self.items))


def route_rule(route: Any, *, exclude: bool = False, is_default: bool = False) -> Rule:
    return Rule(pattern=route, exclude=exclude, is_default=is_default)


def component_rule(identifier: Any, actions: Union[str, Iterable[str]], *, exclude: bool = False) -> Rule:
    return Rule(pattern=identifier, actions=actions, exclude=exclude)  # type: ignore[arg-type]


def list_rule(identifier: Any, items: Any, *, exclude: bool = False) -> Rule:
    return Rule(pattern=identifier, items=items, exclude=exclude)


__all__ = ["Rule", "route_rule", "component_rule", "list_rule"]
