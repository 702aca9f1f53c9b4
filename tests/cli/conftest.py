import importlib.util

import pytest


def _has_module(modname: str) -> bool:
    """Return True if the given module can be imported (present on sys.path)."""
    return importlib.util.find_spec(modname) is not None


def pytest_collection_modifyitems(config, items):
    """Skip CLI tests whose optional dependency is missing.

    - 'validate' in the node id: needs 'jsonschema'.
    - 'yaml' in the node id: needs 'PyYAML' (import name 'yaml').
    """
    missing_jsonschema = not _has_module("jsonschema")
    missing_yaml = not _has_module("yaml")

    if not (missing_jsonschema or missing_yaml):
        return

    skip_validate = pytest.mark.skip(reason="optional dependency 'jsonschema' not installed")
    skip_yaml = pytest.mark.skip(reason="optional dependency 'PyYAML' not installed")

    for item in items:
        nid = item.nodeid
        if missing_jsonschema and "validate" in nid:
            item.add_marker(skip_validate)
        if missing_yaml and "yaml" in nid:
            item.add_marker(skip_yaml)
