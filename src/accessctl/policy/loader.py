from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Mapping, Optional

from ..core.access_control import AccessControl
from ..core.errors import PatternError, PolicyDocumentError, RuleShapeError
from ..core.hierarchy import Group, Role
from ..core.permission import Permission

logger = logging.getLogger("accessctl.policy")

_YAML_EXTENSIONS = (".yaml", ".yml")


def _parse_yaml(text: str) -> Any:
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as e:
        raise RuntimeError("Install accessctl[yaml] to load YAML documents") from e
    return yaml.safe_load(text)


def parse_document(text: str, fmt: Optional[str] = None) -> Dict[str, Any]:
    """Parse a configuration document given as text.

    *fmt* is ``"json"`` or ``"yaml"``; when omitted, text starting with ``{``
    is read as JSON and anything else as YAML.
    """
    if fmt is None:
        fmt = "json" if text.lstrip().startswith("{") else "yaml"
    if fmt == "json":
        doc = json.loads(text)
    elif fmt == "yaml":
        doc = _parse_yaml(text)
    else:
        raise ValueError(f"unsupported document format: {fmt!r}")
    if doc is None:
        doc = {}
    if not isinstance(doc, dict):
        raise PolicyDocumentError("document root must be a mapping")
    return doc


def load_document(path: str, *, validate_schema: bool = False) -> Dict[str, Any]:
    """Read and parse the document at *path* (format chosen by extension)."""
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    fmt = "yaml" if os.path.splitext(path)[1].lower() in _YAML_EXTENSIONS else "json"
    doc = parse_document(text, fmt)

    if validate_schema:
        from ..dsl.validate import validate_document

        try:
            validate_document(doc)
        except Exception as e:
            logger.exception("accessctl: document validation failed for %s", path, exc_info=e)
            raise

    logger.info("accessctl: loaded document from %s", path)
    return doc


# --- building ----------------------------------------------------------------


def _entries(doc: Mapping[str, Any], key: str, where: str) -> List[Mapping[str, Any]]:
    value = doc.get(key) or []
    if not isinstance(value, list):
        raise PolicyDocumentError(f"{where}{key}: expected a list")
    for i, entry in enumerate(value):
        if not isinstance(entry, Mapping):
            raise PolicyDocumentError(f"{where}{key}[{i}]: expected a mapping")
    return value


def _code(entry: Mapping[str, Any], where: str) -> str:
    code = entry.get("code")
    if not isinstance(code, str) or not code:
        raise PolicyDocumentError(f"{where}: 'code' must be a non-empty string")
    return code


def _build_permissions(target: Any, entry: Mapping[str, Any], where: str) -> None:
    for i, spec in enumerate(_entries(entry, "permissions", f"{where}.")):
        loc = f"{where}.permissions[{i}]"
        kind = spec.get("type")
        rules = spec.get("rules") or []
        if not isinstance(kind, str) or not kind:
            raise PolicyDocumentError(f"{loc}: 'type' must be a non-empty string")
        if not isinstance(rules, list):
            raise PolicyDocumentError(f"{loc}.rules: expected a list")
        try:
            Permission(target, kind, rules)
        except (RuleShapeError, PatternError) as e:
            raise PolicyDocumentError(f"{loc}: {e}") from e


def build_access_control(doc: Mapping[str, Any], **kwargs: Any) -> AccessControl:
    """Create roles, groups and permissions described by *doc*.

    Keyword arguments are passed to :class:`AccessControl` (``logger_sink``,
    ``metrics``). Group references may point at groups declared later in the
    document.
    """
    group_entries = _entries(doc, "groups", "")
    role_entries = _entries(doc, "roles", "")

    groups: Dict[str, Group] = {}
    for i, entry in enumerate(group_entries):
        code = _code(entry, f"groups[{i}]")
        if code in groups:
            raise PolicyDocumentError(f"groups[{i}]: duplicate group code {code!r}")
        groups[code] = Group(code)

    for i, entry in enumerate(group_entries):
        parent = entry.get("inherit_from")
        if parent is None:
            continue
        if parent not in groups:
            raise PolicyDocumentError(f"groups[{i}]: unknown parent group {parent!r}")
        groups[entry["code"]].inherit(groups[parent])

    for i, entry in enumerate(group_entries):
        _build_permissions(groups[entry["code"]], entry, f"groups[{i}]")

    roles: Dict[str, Role] = {}
    for i, entry in enumerate(role_entries):
        code = _code(entry, f"roles[{i}]")
        if code in roles:
            raise PolicyDocumentError(f"roles[{i}]: duplicate role code {code!r}")
        role = Role(code, entry.get("config"))
        group_code = entry.get("group")
        if group_code is not None:
            if group_code not in groups:
                raise PolicyDocumentError(f"roles[{i}]: unknown group {group_code!r}")
            groups[group_code].assign_role(role)
        _build_permissions(role, entry, f"roles[{i}]")
        roles[code] = role

    logger.debug("accessctl: built %d role(s) and %d group(s)", len(roles), len(groups))
    return AccessControl(roles.values(), groups.values(), **kwargs)


__all__ = ["parse_document", "load_document", "build_access_control"]
