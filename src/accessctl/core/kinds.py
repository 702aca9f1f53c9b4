from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from .errors import RuleShapeError
from .model import Action
from .rules import Rule


class EvaluationStyle(str, Enum):
    SINGLE = "single"
    LIST = "list"


@dataclass(frozen=True)
class PermissionKind:
    """Describes one permission shape.

    ``name`` is the tag shared by permissions and actions of this kind.
    ``pattern_field`` names the rule field (in mappings and documents) and the
    action parameter holding the identifier being checked. For list kinds the
    requested items travel in the action parameter named after the kind.
    """

    name: str
    style: EvaluationStyle
    pattern_field: str
    requires_actions: bool = False
    supports_middlewares: bool = False
    supports_default: bool = False

    @property
    def is_list(self) -> bool:
        return self.style is EvaluationStyle.LIST

    @property
    def items_parameter(self) -> str:
        return self.name

    # --- rules ---------------------------------------------------------------

    def allowed_rule_fields(self) -> frozenset[str]:
        fields = {self.pattern_field, "exclude"}
        if self.supports_default:
            fields.add("is_default")
        if self.requires_actions:
            fields.add("actions")
        if self.is_list:
            fields.add("list")
        return frozenset(fields)

    def check_rule(self, rule: Rule) -> Rule:
        if self.requires_actions and rule.actions is None:
            raise RuleShapeError(f"{self.name} rules need an 'actions' list")
        if self.is_list and rule.items is None:
            raise RuleShapeError(f"{self.name} rules need a 'list' of items or a pattern")
        return rule

    def coerce_rule(self, rule: Union[Rule, Mapping[str, Any]]) -> Rule:
        """Accept a :class:`Rule` or a mapping written with this kind's field names."""
        if isinstance(rule, Rule):
            return self.check_rule(rule)
        if not isinstance(rule, Mapping):
            raise RuleShapeError(f"{self.name} rule must be a Rule or a mapping, got {type(rule).__name__}")

        unknown = set(rule) - self.allowed_rule_fields()
        if unknown:
            raise RuleShapeError(f"unknown field(s) for {self.name} rule: {', '.join(sorted(unknown))}")
        if self.pattern_field not in rule:
            raise RuleShapeError(f"{self.name} rule is missing '{self.pattern_field}'")

        kwargs: Dict[str, Any] = {
            "pattern": rule[self.pattern_field],
            "exclude": rule.get("exclude", False),
            "is_default": rule.get("is_default", False),
        }
        if self.requires_actions:
            kwargs["actions"] = rule.get("actions")
        if self.is_list:
            kwargs["items"] = rule.get("list")
        return self.check_rule(Rule(**kwargs))

    # --- actions -------------------------------------------------------------

    def identifier_of(self, action: Action) -> Optional[str]:
        value = action.get(self.pattern_field)
        return value if isinstance(value, str) else None

    def requested_items(self, action: Action) -> list[str]:
        items = action.get(self.items_parameter) or []
        if isinstance(items, str):
            items = [items]
        return [item for item in items if isinstance(item, str)]

    def denial_message(self, action: Action) -> str:
        identifier = self.identifier_of(action)
        if self.is_list:
            return f"No access permission for {self.name} '{identifier}'"
        if self.requires_actions:
            return f"action '{action.get('action')}' is not allowed on {self.name} '{identifier}'"
        return "route access is not allowed"


def list_kind(name: str) -> PermissionKind:
    """Build a list-family kind (items filtered per identifier)."""
    return PermissionKind(name=name, style=EvaluationStyle.LIST, pattern_field="identifier")


NAVIGATION = PermissionKind(
    name="navigation",
    style=EvaluationStyle.SINGLE,
    pattern_field="route",
    supports_middlewares=True,
    supports_default=True,
)
COMPONENT = PermissionKind(
    name="component",
    style=EvaluationStyle.SINGLE,
    pattern_field="identifier",
    requires_actions=True,
)
MENU = list_kind("menu")
DROPDOWN = list_kind("dropdown")
LIST = list_kind("list")

BUILTIN_KINDS: Dict[str, PermissionKind] = {
    k.name: k for k in (NAVIGATION, COMPONENT, MENU, DROPDOWN, LIST)
}


def resolve_kind(kind: Union[str, PermissionKind]) -> PermissionKind:
    """Return the kind for *kind*; unknown names become new list families."""
    if isinstance(kind, PermissionKind):
        return kind
    if not isinstance(kind, str) or not kind:
        raise RuleShapeError(f"permission kind must be a non-empty string, got {kind!r}")
    return BUILTIN_KINDS.get(kind) or list_kind(kind)


__all__ = [
    "EvaluationStyle",
    "PermissionKind",
    "list_kind",
    "resolve_kind",
    "NAVIGATION",
    "COMPONENT",
    "MENU",
    "DROPDOWN",
    "LIST",
    "BUILTIN_KINDS",
]
