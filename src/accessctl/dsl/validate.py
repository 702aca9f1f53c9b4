from __future__ import annotations

from typing import Any, Dict, List

_PATTERN: Dict[str, Any] = {
    "oneOf": [
        {"type": "string"},
        {
            "type": "object",
            "properties": {"regex": {"type": "string"}},
            "required": ["regex"],
            "additionalProperties": False,
        },
        {
            "type": "object",
            "properties": {"glob": {"type": "string"}},
            "required": ["glob"],
            "additionalProperties": False,
        },
    ]
}

_RULE: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "route": {"$ref": "#/$defs/pattern"},
        "identifier": {"$ref": "#/$defs/pattern"},
        "actions": {"type": "array", "items": {"type": "string"}, "minItems": 1},
        "list": {
            "oneOf": [
                {"type": "array", "items": {"type": "string"}},
                {"$ref": "#/$defs/pattern"},
            ]
        },
        "exclude": {"type": "boolean"},
        "is_default": {"type": "boolean"},
    },
    "oneOf": [{"required": ["route"]}, {"required": ["identifier"]}],
    "additionalProperties": False,
}

_PERMISSION: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "type": {"type": "string", "minLength": 1},
        "rules": {"type": "array", "items": {"$ref": "#/$defs/rule"}},
    },
    "required": ["type"],
    "additionalProperties": False,
}

DOCUMENT_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "accessctl configuration document",
    "type": "object",
    "$defs": {"pattern": _PATTERN, "rule": _RULE, "permission": _PERMISSION},
    "properties": {
        "groups": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "code": {"type": "string", "minLength": 1},
                    "inherit_from": {"type": "string", "minLength": 1},
                    "permissions": {"type": "array", "items": {"$ref": "#/$defs/permission"}},
                },
                "required": ["code"],
                "additionalProperties": False,
            },
        },
        "roles": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "code": {"type": "string", "minLength": 1},
                    "group": {"type": "string", "minLength": 1},
                    "config": {},
                    "permissions": {"type": "array", "items": {"$ref": "#/$defs/permission"}},
                },
                "required": ["code"],
                "additionalProperties": False,
            },
        },
    },
    "additionalProperties": False,
}

_INSTALL_HINT = "Install accessctl[validate] to enable schema validation"


def _jsonschema() -> Any:
    try:
        import jsonschema  # type: ignore[import-untyped]
    except ImportError as e:
        raise RuntimeError(_INSTALL_HINT) from e
    return jsonschema


def validate_document(doc: Dict[str, Any]) -> None:
    """Raise ``jsonschema.ValidationError`` when *doc* does not fit the schema."""
    jsonschema = _jsonschema()
    jsonschema.validate(instance=doc, schema=DOCUMENT_SCHEMA)


def document_errors(doc: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Every schema violation in *doc* as ``{"message", "path"}`` dicts."""
    jsonschema = _jsonschema()
    validator = jsonschema.Draft202012Validator(DOCUMENT_SCHEMA)
    out: List[Dict[str, Any]] = []
    for err in sorted(validator.iter_errors(doc), key=lambda e: [str(p) for p in e.absolute_path]):
        path = "/" + "/".join(str(p) for p in err.absolute_path)
        out.append({"code": "SCHEMA", "message": err.message, "path": path})
    return out


__all__ = ["DOCUMENT_SCHEMA", "validate_document", "document_errors"]
