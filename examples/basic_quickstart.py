from accessctl import (
    AccessControl,
    Group,
    Role,
    create_dropdown_action,
    create_dropdown_permission,
    create_route_action,
    create_route_permission,
    glob,
)
from accessctl.core.rules import list_rule, route_rule
from accessctl.logging.decision_logger import DecisionLogger


def main() -> None:
    staff = Group("STAFF")
    clerk = Role("CLERK")
    staff.assign_role(clerk)

    create_route_permission(staff, [route_rule("/home", is_default=True)])
    create_route_permission(
        clerk, [route_rule(glob("/orders/*")), route_rule("/orders/refunds", exclude=True)]
    )
    create_dropdown_permission(staff, [list_rule("status", ["open", "closed", "void"])])
    create_dropdown_permission(clerk, [list_rule("status", ["void"], exclude=True)])

    ac = AccessControl([clerk], [staff], logger_sink=DecisionLogger(as_json=True))

    print(ac.is_allowed(create_route_action("CLERK", "/orders/42")))  # False: group only grants /home
    result = ac.check_permissions(create_route_action("CLERK", "/home"))
    print(result.allowed)  # True

    action = create_dropdown_action("CLERK", "status", ["open", "closed", "void"])
    print(ac.get_accessible_list(action))  # ['open', 'closed']


if __name__ == "__main__":
    main()
