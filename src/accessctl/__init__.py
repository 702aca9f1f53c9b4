from . import core
from .core import (
    COMPONENT,
    DROPDOWN,
    LIST,
    MENU,
    NAVIGATION,
    AccessControl,
    AccessControlError,
    Action,
    Group,
    GroupAssignmentError,
    HierarchyCycleError,
    PatternError,
    Permission,
    PermissionKind,
    PermissionMessage,
    PolicyDocumentError,
    RegistrationError,
    Role,
    Rule,
    RuleShapeError,
    Status,
    component_rule,
    glob,
    list_kind,
    list_rule,
    regex,
    route_rule,
)
from .factory import (
    create_access_control,
    create_component_action,
    create_component_permission,
    create_dropdown_action,
    create_dropdown_permission,
    create_list_action,
    create_list_permission,
    create_menu_action,
    create_menu_permission,
    create_route_action,
    create_route_permission,
)
from .policy.loader import build_access_control, load_document

try:
    from importlib.metadata import PackageNotFoundError, version
except Exception:  # pragma: no cover
    PackageNotFoundError = Exception  # type: ignore[assignment,misc]
    version = None  # type: ignore[assignment]

_FALLBACK_VERSION = "0.1.0"


def _detect_version() -> str:
    if version is None:
        return _FALLBACK_VERSION
    try:
        return version("accessctl")
    except PackageNotFoundError:
        return _FALLBACK_VERSION


__version__ = _detect_version()

__all__ = [
    "core",
    "AccessControl",
    "Action",
    "Group",
    "Role",
    "Permission",
    "PermissionKind",
    "PermissionMessage",
    "Status",
    "Rule",
    "route_rule",
    "component_rule",
    "list_rule",
    "list_kind",
    "glob",
    "regex",
    "NAVIGATION",
    "COMPONENT",
    "MENU",
    "DROPDOWN",
    "LIST",
    "AccessControlError",
    "GroupAssignmentError",
    "HierarchyCycleError",
    "PatternError",
    "PolicyDocumentError",
    "RegistrationError",
    "RuleShapeError",
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
    "build_access_control",
    "load_document",
    "__version__",
]
