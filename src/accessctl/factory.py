"""Shorthand constructors for the common permission and action kinds."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from .core.access_control import AccessControl
from .core.hierarchy import Group, Role
from .core.kinds import COMPONENT, DROPDOWN, LIST, MENU, NAVIGATION, PermissionKind, list_kind
from .core.model import Action
from .core.permission import Middleware, Permission
from .core.rules import Rule

Target = Union[Role, Group]
RuleLike = Union[Rule, Mapping[str, Any]]


def create_access_control(
    roles: Iterable[Role] = (),
    groups: Iterable[Group] = (),
    **kwargs: Any,
) -> AccessControl:
    return AccessControl(roles, groups, **kwargs)


def create_route_permission(
    target: Target,
    rules: Iterable[RuleLike],
    middlewares: Iterable[Middleware] = (),
) -> Permission:
    return Permission(target, NAVIGATION, rules, middlewares)


def create_component_permission(target: Target, rules: Iterable[RuleLike]) -> Permission:
    return Permission(target, COMPONENT, rules)


def create_menu_permission(target: Target, rules: Iterable[RuleLike]) -> Permission:
    return Permission(target, MENU, rules)


def create_dropdown_permission(target: Target, rules: Iterable[RuleLike]) -> Permission:
    return Permission(target, DROPDOWN, rules)


def create_list_permission(
    target: Target,
    rules: Iterable[RuleLike],
    kind: Union[str, PermissionKind, None] = None,
) -> Permission:
    """List permission of the generic ``list`` kind or of a named list family."""
    if kind is None:
        resolved = LIST
    elif isinstance(kind, PermissionKind):
        resolved = kind
    else:
        resolved = list_kind(kind)
    return Permission(target, resolved, rules)


def create_route_action(role_code: str, route: str) -> Action:
    return Action(role_code, NAVIGATION.name, {"route": route})


def create_component_action(role_code: str, identifier: str, action: str) -> Action:
    return Action(role_code, COMPONENT.name, {"identifier": identifier, "action": action})


def create_menu_action(role_code: str, identifier: str, items: Sequence[str]) -> Action:
    return Action(role_code, MENU.name, {"identifier": identifier, MENU.items_parameter: list(items)})


def create_dropdown_action(role_code: str, identifier: str, items: Sequence[str]) -> Action:
    return Action(
        role_code, DROPDOWN.name, {"identifier": identifier, DROPDOWN.items_parameter: list(items)}
    )


def create_list_action(
    role_code: str,
    identifier: str,
    items: Sequence[str],
    kind: Optional[str] = None,
) -> Action:
    name = kind or LIST.name
    return Action(role_code, name, {"identifier": identifier, name: list(items)})


__all__ = [
    "create_access_control",
    "create_route_permission",
    "create_component_permission",
    "create_menu_permission",
    "create_dropdown_permission",
    "create_list_permission",
    "create_route_action",
    "create_component_action",
    "create_menu_action",
    "create_dropdown_action",
    "create_list_action",
]
