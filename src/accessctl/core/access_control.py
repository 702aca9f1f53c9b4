from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from .errors import RegistrationError
from .evaluator import merge_unique
from .hierarchy import Group, Role
from .model import Action, PermissionMessage
from .ports import DecisionLogSink, MetricsSink

logger = logging.getLogger("accessctl.core")

SuccessCallback = Callable[[Action], Any]
FailureCallback = Callable[[Action, PermissionMessage], Any]

ROLE_NOT_FOUND = "Role not found."
NO_MATCHING_PERMISSIONS = "No matching permissions found."


class AccessControl:
    """Registry of roles and groups that answers authorization checks.

    Every instance owns its registry; several can coexist in one process.
    Checks are synchronous and callbacks run on the caller's thread before
    :meth:`check_permissions` returns.
    """

    def __init__(
        self,
        roles: Iterable[Role] = (),
        groups: Iterable[Group] = (),
        *,
        logger_sink: Optional[DecisionLogSink] = None,
        metrics: Optional[MetricsSink] = None,
    ) -> None:
        self._roles: Dict[str, Role] = {}
        self._groups: Dict[str, Group] = {}
        self.logger_sink = logger_sink
        self.metrics = metrics
        for role in roles:
            self.add_role(role)
        for group in groups:
            self.add_group(group)

    # --- registry ------------------------------------------------------------

    def add_role(self, role: Role) -> None:
        existing = self._roles.get(role.code)
        if existing is role:
            return
        if existing is not None:
            raise RegistrationError(f"a different role is already registered as {role.code!r}")
        self._roles[role.code] = role

    def add_group(self, group: Group) -> None:
        existing = self._groups.get(group.code)
        if existing is group:
            return
        if existing is not None:
            raise RegistrationError(f"a different group is already registered as {group.code!r}")
        self._groups[group.code] = group

    def get_role_by_code(self, code: str) -> Optional[Role]:
        return self._roles.get(code)

    def get_group_by_code(self, code: str) -> Optional[Group]:
        return self._groups.get(code)

    @property
    def roles(self) -> List[Role]:
        return list(self._roles.values())

    @property
    def groups(self) -> List[Group]:
        return list(self._groups.values())

    def get_roles(self) -> List[Role]:
        return self.roles

    # --- checks --------------------------------------------------------------

    def _decide(self, action: Action) -> PermissionMessage:
        role = self.get_role_by_code(action.role_code)
        if role is None:
            logger.debug("role %s not found", action.role_code)
            return PermissionMessage.failure(ROLE_NOT_FOUND, action=action)

        permissions = role.get_permissions(action.type)
        if not permissions:
            return PermissionMessage.failure(NO_MATCHING_PERMISSIONS, target=role, action=action)

        for permission in permissions:
            result = permission.validate(action)
            if result is not None and result.failed:
                return result

        return PermissionMessage.success(action=action, target=role)

    def check_permissions(
        self,
        action: Action,
        on_success: Optional[SuccessCallback] = None,
        on_failure: Optional[FailureCallback] = None,
    ) -> PermissionMessage:
        """Authorize *action* and report the outcome.

        Every permission of ``action.type`` visible to the role is validated
        in order; the first failure stops the loop and goes to *on_failure*.
        *on_success* is called once when all of them pass. The outcome is
        also returned, so callbacks are optional.
        """
        start = time.perf_counter()
        result = self._decide(action)
        self._record(action, result, time.perf_counter() - start)

        if result.failed:
            if on_failure is not None:
                on_failure(action, result)
        elif on_success is not None:
            on_success(action)
        return result

    def is_allowed(self, action: Action) -> bool:
        return self.check_permissions(action).allowed

    def get_accessible_list(self, action: Action) -> List[str]:
        """Requested items the acting role may see, for list-kind actions.

        Uses the role's own permissions of the action's kind; a role without
        any falls back to those of its group and the group's ancestors.
        """
        role = self.get_role_by_code(action.role_code)
        if role is None:
            return []
        permissions = [p for p in role.get_permissions(action.type) if p.target is role]
        if not permissions and role.group is not None:
            permissions = [p for g in role.group.lineage() for p in g.get_permissions(action.type)]

        items: List[str] = []
        for permission in permissions:
            if permission.kind.is_list:
                items = merge_unique(items, permission.get_accessible_list(action))
        return items

    # --- telemetry -----------------------------------------------------------

    def _record(self, action: Action, result: PermissionMessage, elapsed: float) -> None:
        decision = "allow" if result.allowed else "deny"
        target = result.target

        if self.logger_sink is not None:
            payload = {
                "role": action.role_code,
                "type": action.type,
                "parameters": dict(action.parameters),
                "decision": decision,
                "allowed": result.allowed,
                "reason": result.message,
                "target": getattr(target, "code", None),
            }
            try:
                self.logger_sink.log(payload)
            except Exception:
                # a broken sink must not change the decision
                logger.debug("decision log sink failed", exc_info=True)

        if self.metrics is not None:
            labels = {"decision": decision}
            try:
                self.metrics.inc("accessctl_decisions_total", labels)
                observe = getattr(self.metrics, "observe", None)
                if observe is not None:
                    observe("accessctl_decision_seconds", elapsed, labels)
            except Exception:
                logger.debug("metrics sink failed", exc_info=True)


__all__ = ["AccessControl", "ROLE_NOT_FOUND", "NO_MATCHING_PERMISSIONS"]
