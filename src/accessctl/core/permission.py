from __future__ import annotations

from typing import Any, Callable, Iterable, List, Mapping, Optional, Union

from .errors import RuleShapeError
from .evaluator import (
    accumulate_items,
    merge_unique,
    select_by_identifier,
    select_rules,
    shared_members,
)
from .hierarchy import Group, Role
from .kinds import PermissionKind, resolve_kind
from .model import Action, PermissionMessage, TargetKind
from .rules import Rule

Target = Union[Role, Group]
Middleware = Callable[["Permission", Action], None]

TYPE_MISMATCH = "action type doesn't match the permission type"


class Permission:
    """A typed bundle of rules bound to one role or group.

    Building a permission registers it on its target. The rules it evaluates
    are the rules inherited from the target's parent (its group for a role,
    its parent group for a group) followed by its own, read at evaluation
    time, so rules added upstream later are still seen.
    """

    def __init__(
        self,
        target: Target,
        kind: Union[str, PermissionKind],
        rules: Iterable[Union[Rule, Mapping[str, Any]]] = (),
        middlewares: Iterable[Middleware] = (),
    ) -> None:
        self.kind = resolve_kind(kind)
        self.target = target
        self._rules: List[Rule] = [self.kind.coerce_rule(r) for r in rules]
        self._middlewares: List[Middleware] = []
        for mw in middlewares:
            self.add_middleware(mw)
        target.assign_permission(self)

    def __repr__(self) -> str:
        return f"Permission({self.type!r}, target={self.target!r}, rules={len(self._rules)})"

    @property
    def type(self) -> str:
        return self.kind.name

    # --- rules ---------------------------------------------------------------

    @property
    def own_rules(self) -> List[Rule]:
        return list(self._rules)

    def inherited_rules(self) -> List[Rule]:
        if self.target.kind is TargetKind.ROLE:
            group = self.target.group  # type: ignore[union-attr]
            return group.collect_rules(self.kind) if group is not None else []
        parent = self.target.inherit_from  # type: ignore[union-attr]
        return parent.collect_rules(self.kind) if parent is not None else []

    @property
    def rules(self) -> List[Rule]:
        return self.inherited_rules() + self._rules

    def get_rules(self) -> List[Rule]:
        return self.rules

    def add_rule(self, rule: Union[Rule, Mapping[str, Any]]) -> "Permission":
        self._rules.append(self.kind.coerce_rule(rule))
        return self

    def add_middleware(self, middleware: Middleware) -> "Permission":
        if not self.kind.supports_middlewares:
            raise RuleShapeError(f"{self.type} permissions do not run middlewares")
        self._middlewares.append(middleware)
        return self

    def get_default_route(self) -> Optional[Rule]:
        if not self.kind.supports_default:
            raise RuleShapeError(f"{self.type} permissions have no default rule")
        return next((rule for rule in self.rules if rule.is_default), None)

    # --- evaluation ----------------------------------------------------------

    def matched_rules(self, action: Action) -> List[Rule]:
        identifier = self.kind.identifier_of(action)
        if identifier is None:
            return []
        if self.kind.is_list:
            return select_by_identifier(self.rules, identifier)
        if self.kind.requires_actions:
            requested = action.get("action")
            if not isinstance(requested, str):
                return []
            return select_rules(self.rules, identifier, requested)
        return select_rules(self.rules, identifier)

    def validate(self, action: Action) -> Optional[PermissionMessage]:
        """Return a failed message, or ``None`` when *action* passes."""
        if action.type != self.type:
            return PermissionMessage.failure(TYPE_MISMATCH, target=self.target, action=action)

        matched = self.matched_rules(action)

        for middleware in self._middlewares:
            middleware(self, action)

        if not matched:
            return PermissionMessage.failure(
                self.kind.denial_message(action), target=self.target, action=action
            )
        return None

    def get_accessible_list(self, action: Action) -> List[str]:
        """Items of the action's request list this permission grants.

        For a role in a group, an item must be granted both by the role's
        rules and by at least one permission of the same kind on the group or
        one of its ancestors.
        """
        if not self.kind.is_list:
            raise RuleShapeError(f"{self.type} permissions have no item list")
        if action.type != self.type:
            return []
        identifier = self.kind.identifier_of(action)
        if identifier is None:
            return []

        selected = select_by_identifier(self.rules, identifier)
        own = accumulate_items(selected, self.kind.requested_items(action))

        if self.target.kind is TargetKind.GROUP:
            return own
        group = self.target.group  # type: ignore[union-attr]
        if group is None:
            return own

        granted: List[str] = []
        for member in group.lineage():
            for permission in member.get_permissions(self.kind):
                granted = merge_unique(granted, permission.get_accessible_list(action))
        return shared_members(granted, own)


__all__ = ["Permission", "Middleware", "Target", "TYPE_MISMATCH"]
