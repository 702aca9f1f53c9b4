import json

import pytest

from accessctl.core.errors import HierarchyCycleError, PolicyDocumentError
from accessctl.core.model import Action
from accessctl.policy.loader import build_access_control, load_document, parse_document


def _doc():
    return {
        "groups": [
            {
                "code": "STAFF",
                "permissions": [
                    {"type": "navigation", "rules": [{"route": "/home", "is_default": True}]},
                    {"type": "menu", "rules": [{"identifier": "main", "list": ["home", "reports"]}]},
                ],
            },
            {"code": "MANAGERS", "inherit_from": "STAFF"},
        ],
        "roles": [
            {
                "code": "ALICE",
                "group": "MANAGERS",
                "permissions": [
                    {"type": "navigation", "rules": [{"route": {"glob": "/reports/*"}}]},
                    {
                        "type": "component",
                        "rules": [{"identifier": "report-table", "actions": ["view", "export"]}],
                    },
                ],
            },
            {"code": "BOB"},
        ],
    }


def test_parse_json_and_yaml():
    assert parse_document('{"roles": []}') == {"roles": []}
    assert parse_document("") == {}
    with pytest.raises(ValueError):
        parse_document("{}", fmt="toml")
    with pytest.raises(PolicyDocumentError):
        parse_document("[1, 2]", fmt="json")


def test_parse_yaml():
    pytest.importorskip("yaml")
    doc = parse_document("roles:\n  - code: R\n")
    assert doc == {"roles": [{"code": "R"}]}


def test_parse_yaml_without_pyyaml(monkeypatch):
    import builtins

    real_import = builtins.__import__

    def fake_import(name, *args, **kwargs):
        if name == "yaml":
            raise ImportError("no yaml")
        return real_import(name, *args, **kwargs)

    monkeypatch.setattr(builtins, "__import__", fake_import)
    with pytest.raises(RuntimeError, match="accessctl\\[yaml\\]"):
        parse_document("roles: []")


def test_build_wires_hierarchy_and_permissions():
    ac = build_access_control(_doc())
    alice = ac.get_role_by_code("ALICE")
    managers = ac.get_group_by_code("MANAGERS")
    assert alice.group is managers
    assert managers.inherit_from is ac.get_group_by_code("STAFF")

    assert ac.is_allowed(Action("ALICE", "navigation", {"route": "/reports/q1"})) is True
    assert ac.is_allowed(Action("ALICE", "navigation", {"route": "/admin"})) is False
    assert ac.is_allowed(
        Action("ALICE", "component", {"identifier": "report-table", "action": "export"})
    )
    # BOB has no permissions at all
    assert ac.is_allowed(Action("BOB", "navigation", {"route": "/home"})) is False


def test_build_passes_sinks_through():
    class Sink:
        def __init__(self):
            self.payloads = []

        def log(self, payload):
            self.payloads.append(payload)

    sink = Sink()
    ac = build_access_control({"roles": [{"code": "R"}]}, logger_sink=sink)
    ac.check_permissions(Action("R", "navigation", {"route": "/"}))
    assert sink.payloads[0]["decision"] == "deny"


@pytest.mark.parametrize(
    "doc, fragment",
    [
        ({"groups": [{"code": "A", "inherit_from": "NOPE"}]}, "unknown parent group"),
        ({"roles": [{"code": "R", "group": "NOPE"}]}, "unknown group"),
        ({"roles": [{"code": "R"}, {"code": "R"}]}, "duplicate role"),
        ({"groups": [{"code": "G"}, {"code": "G"}]}, "duplicate group"),
        ({"roles": [{"code": ""}]}, "'code'"),
        ({"roles": "R"}, "expected a list"),
        ({"roles": ["R"]}, "expected a mapping"),
        ({"roles": [{"code": "R", "permissions": [{"rules": []}]}]}, "'type'"),
    ],
)
def test_build_rejects_bad_references(doc, fragment):
    with pytest.raises(PolicyDocumentError, match=fragment):
        build_access_control(doc)


def test_bad_rule_is_reported_with_location():
    doc = {
        "roles": [
            {"code": "R", "permissions": [{"type": "navigation", "rules": [{"route": {"regex": "("}}]}]}
        ]
    }
    with pytest.raises(PolicyDocumentError, match=r"roles\[0\]\.permissions\[0\]"):
        build_access_control(doc)


def test_rule_field_for_wrong_kind_is_reported():
    doc = {
        "groups": [
            {"code": "G", "permissions": [{"type": "menu", "rules": [{"route": "/x"}]}]}
        ]
    }
    with pytest.raises(PolicyDocumentError, match=r"groups\[0\]\.permissions\[0\]"):
        build_access_control(doc)


def test_group_cycle_is_rejected():
    doc = {
        "groups": [
            {"code": "A", "inherit_from": "B"},
            {"code": "B", "inherit_from": "A"},
        ]
    }
    with pytest.raises(HierarchyCycleError):
        build_access_control(doc)


def test_unknown_type_becomes_list_family():
    doc = {
        "roles": [
            {
                "code": "R",
                "permissions": [{"type": "toolbar", "rules": [{"identifier": "top", "list": ["save"]}]}],
            }
        ]
    }
    ac = build_access_control(doc)
    action = Action("R", "toolbar", {"identifier": "top", "toolbar": ["save", "delete"]})
    assert ac.is_allowed(action)
    assert ac.get_accessible_list(action) == ["save"]


def test_load_document_json(tmp_path, caplog):
    p = tmp_path / "access.json"
    p.write_text(json.dumps(_doc()), encoding="utf-8")
    caplog.set_level("INFO", logger="accessctl.policy")
    assert load_document(str(p)) == _doc()
    assert any("loaded document" in r.getMessage() for r in caplog.records)


def test_load_document_yaml(tmp_path):
    pytest.importorskip("yaml")
    p = tmp_path / "access.yml"
    p.write_text("roles:\n  - code: R\n    group: G\ngroups:\n  - code: G\n", encoding="utf-8")
    ac = build_access_control(load_document(str(p)))
    assert ac.get_role_by_code("R").group is ac.get_group_by_code("G")


def test_load_document_validates_when_asked(tmp_path):
    jsonschema = pytest.importorskip("jsonschema")
    p = tmp_path / "bad.json"
    p.write_text(json.dumps({"roles": [{"code": "R", "extra": 1}]}), encoding="utf-8")
    with pytest.raises(jsonschema.ValidationError):
        load_document(str(p), validate_schema=True)
    # without the flag the extra key is ignored
    assert load_document(str(p))["roles"][0]["extra"] == 1
