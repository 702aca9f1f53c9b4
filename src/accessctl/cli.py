from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence

from . import __version__
from .core.errors import AccessControlError
from .core.kinds import resolve_kind
from .core.model import Action
from .dsl.validate import document_errors
from .policy.loader import build_access_control, load_document, parse_document

logger = logging.getLogger("accessctl.cli")

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_SCHEMA_ERRORS = 3
EXIT_DENIED = 4
EXIT_ENV = 5


def _read_doc(path: Optional[str]) -> Dict[str, Any]:
    if path:
        return load_document(path)
    return parse_document(sys.stdin.read())


def _print(obj: Any, fmt: str) -> None:
    if fmt == "json":
        sys.stdout.write(json.dumps(obj, ensure_ascii=False, indent=2) + "\n")
        return
    text = obj if isinstance(obj, str) else json.dumps(obj, ensure_ascii=False, indent=2)
    if not text.endswith("\n"):
        text += "\n"
    sys.stdout.write(text)


def _format_issues_text(issues: List[Dict[str, Any]]) -> str:
    lines = []
    for issue in issues:
        path = issue.get("path") or "/"
        lines.append(f"{issue.get('code', 'ERROR')} {path}: {issue.get('message', '')}")
    return "\n".join(lines)


def _document_issues(doc: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Schema violations, or the first build error when the schema passes."""
    issues = document_errors(doc)
    if issues:
        return issues
    try:
        build_access_control(doc)
    except AccessControlError as e:
        return [{"code": "BUILD", "message": str(e), "path": "/"}]
    return []


def cmd_validate(ns: argparse.Namespace) -> int:
    fmt = getattr(ns, "format", "text")
    try:
        doc = _read_doc(getattr(ns, "policy", None))
        issues = _document_issues(doc)
    except RuntimeError as e:
        _print(str(e), "text")
        return EXIT_ENV

    if fmt == "json":
        _print(issues, "json")
    else:
        _print(_format_issues_text(issues) if issues else "OK", "text")
    return EXIT_SCHEMA_ERRORS if issues else EXIT_OK


def _parse_params(pairs: Optional[Sequence[str]]) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    for pair in pairs or ():
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"expected key=value, got {pair!r}")
        params[key] = value
    return params


def cmd_check(ns: argparse.Namespace) -> int:
    fmt = getattr(ns, "format", "text")
    try:
        doc = _read_doc(getattr(ns, "policy", None))
        access = build_access_control(doc)
    except RuntimeError as e:
        _print(str(e), "text")
        return EXIT_ENV
    except AccessControlError as e:
        _print([{"code": "BUILD", "message": str(e), "path": "/"}] if fmt == "json" else str(e), fmt)
        return EXIT_SCHEMA_ERRORS

    kind = resolve_kind(ns.type)
    params = _parse_params(getattr(ns, "param", None))
    items = list(getattr(ns, "item", None) or [])
    if kind.is_list:
        params[kind.items_parameter] = items
    action = Action(ns.role, kind.name, params)

    result = access.check_permissions(action)
    out: Dict[str, Any] = {"allowed": result.allowed, "reason": result.message}
    if kind.is_list:
        out["items"] = access.get_accessible_list(action) if result.allowed else []

    if fmt == "json":
        _print(out, "json")
    else:
        lines = ["ALLOW" if result.allowed else f"DENY: {result.message}"]
        if "items" in out:
            lines.append("items: " + ", ".join(out["items"]))
        _print("\n".join(lines), "text")
    return EXIT_OK if result.allowed else EXIT_DENIED


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="accessctl", description="accessctl document tools")
    parser.add_argument("--version", action="store_true", help="print version and exit")
    sub = parser.add_subparsers(dest="command")

    p_validate = sub.add_parser("validate", help="validate a configuration document")
    p_validate.add_argument("--policy", help="path to a JSON/YAML document (stdin if omitted)")
    p_validate.add_argument("--format", choices=("text", "json"), default="text")
    p_validate.set_defaults(func=cmd_validate)

    p_check = sub.add_parser("check", help="authorize one action against a document")
    p_check.add_argument("--policy", help="path to a JSON/YAML document (stdin if omitted)")
    p_check.add_argument("--role", required=True, help="acting role code")
    p_check.add_argument("--type", required=True, help="action kind, e.g. navigation or menu")
    p_check.add_argument(
        "--param", action="append", metavar="KEY=VALUE", help="action parameter (repeatable)"
    )
    p_check.add_argument("--item", action="append", help="requested item for list kinds (repeatable)")
    p_check.add_argument("--format", choices=("text", "json"), default="text")
    p_check.set_defaults(func=cmd_check)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)

    if ns.version:
        _print(f"accessctl {__version__}", "text")
        return EXIT_OK

    func = getattr(ns, "func", None)
    if func is None:
        parser.print_usage(sys.stdout)
        return EXIT_USAGE

    try:
        return int(func(ns))
    except ValueError as e:
        logger.debug("accessctl: bad input", exc_info=True)
        _print(f"error: {e}", "text")
        return EXIT_USAGE


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
