import pytest

from accessctl.core.errors import RuleShapeError
from accessctl.core.hierarchy import Group, Role
from accessctl.core.kinds import DROPDOWN, LIST, MENU, NAVIGATION, list_kind
from accessctl.core.model import Action
from accessctl.core.permission import TYPE_MISMATCH, Permission
from accessctl.core.rules import list_rule, route_rule


def _menu(identifier, items, role="R"):
    return Action(role, "menu", {"identifier": identifier, "menu": list(items)})


def _dropdown(identifier, items, role="R"):
    return Action(role, "dropdown", {"identifier": identifier, "dropdown": list(items)})


def test_validate_is_an_identifier_gate():
    p = Permission(Role("R"), MENU, [list_rule("main", ["a"])])
    # passes even though "z" is not granted
    assert p.validate(_menu("main", ["z"])) is None

    res = p.validate(_menu("side", ["a"]))
    assert res is not None
    assert res.message == "No access permission for menu 'side'"


def test_validate_type_mismatch():
    p = Permission(Role("R"), MENU, [list_rule("main", ["a"])])
    res = p.validate(_dropdown("main", ["a"]))
    assert res is not None and res.message == TYPE_MISMATCH


def test_identifier_exclusion_does_not_reset_selection():
    p = Permission(
        Role("R"), MENU, [list_rule("main", ["a"]), list_rule("main", ["a"], exclude=True)]
    )
    assert p.validate(_menu("main", ["a"])) is None
    assert p.get_accessible_list(_menu("main", ["a"])) == []


def test_role_without_group_uses_own_list():
    p = Permission(
        Role("R"),
        MENU,
        [list_rule("x", ["a", "b"]), list_rule("x", ["b"], exclude=True)],
    )
    assert p.get_accessible_list(_menu("x", ["a", "b", "c"])) == ["a"]


def test_regex_item_lists():
    p = Permission(Role("R"), MENU, [list_rule({"regex": "^acc"}, {"regex": r"^menu\d$"})])
    assert p.get_accessible_list(_menu("accessReports", ["menu1", "menu22", "menu3"])) == [
        "menu1",
        "menu3",
    ]


def test_group_target_returns_its_own_accumulation():
    parent = Group("P")
    g = Group("G", inherit_from=parent)
    Permission(parent, DROPDOWN, [list_rule("d", ["a"])])
    p = Permission(g, DROPDOWN, [list_rule("d", ["b"])])
    assert p.get_accessible_list(_dropdown("d", ["a", "b", "c"])) == ["a", "b"]


def test_role_group_exclusion_scenario():
    g = Group("G")
    role = Role("R")
    g.assign_role(role)
    Permission(g, DROPDOWN, [list_rule("menu", ["b", "c"])])
    p = Permission(role, DROPDOWN, [list_rule("menu", ["b"], exclude=True)])
    assert p.get_accessible_list(_dropdown("menu", ["a", "b", "c"])) == ["c"]


def test_role_and_group_lists_intersect():
    g = Group("G")
    role = Role("R")
    g.assign_role(role)
    Permission(g, MENU, [list_rule("other", ["x"])])
    g_perm = Permission(g, MENU, [list_rule("m", ["b", "c"])])
    # the role's own rules also grant "a"; the group never does
    p = Permission(role, MENU, [list_rule("m", ["a", "b"])])

    action = _menu("m", ["a", "b", "c"])
    assert g_perm.get_accessible_list(action) == ["b", "c"]
    assert p.get_accessible_list(action) == ["b", "c"]
    # with a role exclusion of "c" only "b" is left
    p.add_rule(list_rule("m", ["c"], exclude=True))
    assert p.get_accessible_list(action) == ["b"]


def test_group_union_spans_all_group_permissions():
    g = Group("G")
    role = Role("R")
    g.assign_role(role)
    Permission(g, MENU, [list_rule("m", ["a"])])
    Permission(g, MENU, [list_rule("m", ["c"])])
    p = Permission(role, MENU, [])

    assert p.get_accessible_list(_menu("m", ["a", "b", "c"])) == ["a", "c"]


def test_group_without_list_permission_grants_nothing():
    g = Group("G")
    role = Role("R")
    g.assign_role(role)
    p = Permission(role, MENU, [list_rule("m", ["a"])])
    assert p.get_accessible_list(_menu("m", ["a"])) == []


def test_accessible_list_is_idempotent():
    g = Group("G")
    role = Role("R")
    g.assign_role(role)
    Permission(g, MENU, [list_rule("m", ["a", "b"])])
    p = Permission(role, MENU, [list_rule("m", ["b"], exclude=True)])
    action = _menu("m", ["a", "b"])
    first = p.get_accessible_list(action)
    assert first == p.get_accessible_list(action) == ["a"]
    assert p.validate(action) == p.validate(action)


def test_generic_list_and_custom_families():
    p = Permission(Role("R"), LIST, [list_rule("l", ["a"])])
    assert p.get_accessible_list(Action("R", "list", {"identifier": "l", "list": ["a", "b"]})) == [
        "a"
    ]

    tabs = list_kind("tabs")
    t = Permission(Role("T"), tabs, [{"identifier": "t", "list": ["x"]}])
    assert t.get_accessible_list(Action("T", "tabs", {"identifier": "t", "tabs": ["x", "y"]})) == [
        "x"
    ]


def test_wrong_action_type_grants_nothing():
    p = Permission(Role("R"), MENU, [list_rule("m", ["a"])])
    assert p.get_accessible_list(_dropdown("m", ["a"])) == []


def test_accessible_list_needs_a_list_kind():
    p = Permission(Role("R"), NAVIGATION, [route_rule("/")])
    with pytest.raises(RuleShapeError):
        p.get_accessible_list(Action("R", "navigation", {"route": "/"}))


def test_intersection_law():
    g = Group("G")
    role = Role("R")
    g.assign_role(role)
    Permission(g, MENU, [list_rule("m", ["b", "c"])])
    p = Permission(role, MENU, [list_rule("m", ["a"]), list_rule("m", ["c"], exclude=True)])
    action = _menu("m", ["a", "b", "c"])

    # role level grants {a, b}, group level grants {b, c}
    assert p.get_accessible_list(action) == ["b"]


def test_group_level_grant_includes_ancestors():
    parent = Group("P")
    child = Group("C", inherit_from=parent)
    role = Role("R")
    child.assign_role(role)
    Permission(parent, MENU, [list_rule("m", ["a", "b"])])
    p = Permission(role, MENU, [list_rule("m", ["a"]), list_rule("m", ["b"], exclude=True)])
    action = _menu("m", ["a", "b", "c"])

    assert p.validate(action) is None
    assert p.get_accessible_list(action) == ["a"]


def test_group_level_grant_unions_own_and_ancestor_permissions():
    parent = Group("P")
    child = Group("C", inherit_from=parent)
    role = Role("R")
    child.assign_role(role)
    Permission(parent, MENU, [list_rule("m", ["a"])])
    Permission(child, MENU, [list_rule("m", ["a"], exclude=True), list_rule("m", ["c"])])
    # role rules: inherited from C (a, then -a, then c) plus its own b
    p = Permission(role, MENU, [list_rule("m", ["b"])])
    action = _menu("m", ["a", "b", "c"])

    # C grants {c}, P grants {a}; the role itself grants {b, c}
    assert p.get_accessible_list(action) == ["c"]
