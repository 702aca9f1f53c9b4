from .access_control import AccessControl
from .errors import (
    AccessControlError,
    GroupAssignmentError,
    HierarchyCycleError,
    PatternError,
    PolicyDocumentError,
    RegistrationError,
    RuleShapeError,
)
from .hierarchy import Group, Role
from .kinds import COMPONENT, DROPDOWN, LIST, MENU, NAVIGATION, PermissionKind, list_kind
from .matcher import glob, matches, regex
from .model import Action, PermissionMessage, Status, TargetKind
from .permission import Permission
from .rules import Rule, component_rule, list_rule, route_rule

__all__ = [
    "AccessControl",
    "Action",
    "PermissionMessage",
    "Status",
    "TargetKind",
    "Group",
    "Role",
    "Permission",
    "PermissionKind",
    "list_kind",
    "NAVIGATION",
    "COMPONENT",
    "MENU",
    "DROPDOWN",
    "LIST",
    "Rule",
    "route_rule",
    "component_rule",
    "list_rule",
    "glob",
    "regex",
    "matches",
    "AccessControlError",
    "GroupAssignmentError",
    "HierarchyCycleError",
    "PatternError",
    "PolicyDocumentError",
    "RegistrationError",
    "RuleShapeError",
]
