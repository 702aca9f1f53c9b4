from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterator, List, Optional, Union

from .errors import GroupAssignmentError, HierarchyCycleError
from .kinds import PermissionKind
from .model import TargetKind
from .rules import Rule

if TYPE_CHECKING:  # pragma: no cover
    from .permission import Permission

logger = logging.getLogger("accessctl.core")

KindRef = Union[str, PermissionKind, None]


def _kind_name(kind: KindRef) -> Optional[str]:
    if isinstance(kind, PermissionKind):
        return kind.name
    return kind


def _filter(permissions: List["Permission"], kind: KindRef) -> List["Permission"]:
    name = _kind_name(kind)
    if name is None:
        return list(permissions)
    return [p for p in permissions if p.type == name]


def _contains(items: List[Any], obj: Any) -> bool:
    return any(x is obj for x in items)


class Group:
    """A named set of roles and permissions, optionally inheriting from a parent group."""

    kind = TargetKind.GROUP

    def __init__(self, code: str, inherit_from: Optional["Group"] = None) -> None:
        self.code = code
        self._parent: Optional[Group] = None
        self._roles: List[Role] = []
        self._permissions: List["Permission"] = []
        if inherit_from is not None:
            self.inherit(inherit_from)

    def __repr__(self) -> str:
        return f"Group({self.code!r})"

    # --- inheritance ---------------------------------------------------------

    @property
    def inherit_from(self) -> Optional["Group"]:
        return self._parent

    def inherit(self, parent: Optional["Group"]) -> None:
        """Set (or clear, with ``None``) the parent group.

        Raises HierarchyCycleError when *parent* is this group or one of its
        descendants.
        """
        node = parent
        while node is not None:
            if node is self:
                raise HierarchyCycleError(
                    f"group {self.code} cannot inherit from {parent.code}: inheritance would form a cycle"  # type: ignore[union-attr]
                )
            node = node._parent
        self._parent = parent

    def ancestors(self) -> Iterator["Group"]:
        node = self._parent
        while node is not None:
            yield node
            node = node._parent

    def lineage(self) -> Iterator["Group"]:
        """This group followed by its ancestors, nearest first."""
        yield self
        yield from self.ancestors()

    # --- membership ----------------------------------------------------------

    @property
    def roles(self) -> List["Role"]:
        return list(self._roles)

    def get_roles(self) -> List["Role"]:
        return self.roles

    def assign_role(self, role: "Role") -> None:
        """Attach *role* to this group, detaching it from its previous group first."""
        previous = role.group
        if previous is self:
            self._enrol(role)
            return
        if previous is not None:
            previous.exclude_role(role)
            logger.debug("role %s moved from group %s to %s", role.code, previous.code, self.code)
        role.assign_group(self)

    def exclude_role(self, role: "Role") -> None:
        self._roles = [r for r in self._roles if r is not role]
        if role.group is self:
            role._group = None

    def _enrol(self, role: "Role") -> None:
        if not _contains(self._roles, role):
            self._roles.append(role)

    # --- permissions ---------------------------------------------------------

    def assign_permission(self, permission: "Permission") -> None:
        if not _contains(self._permissions, permission):
            self._permissions.append(permission)

    def get_permissions(self, kind: KindRef = None) -> List["Permission"]:
        return _filter(self._permissions, kind)

    def collect_rules(self, kind: Union[str, PermissionKind]) -> List[Rule]:
        """Effective rules this group hands down for *kind*.

        A group without permissions of *kind* passes its parent's rules through.
        """
        permissions = self.get_permissions(kind)
        if permissions:
            return [rule for p in permissions for rule in p.rules]
        if self._parent is not None:
            return self._parent.collect_rules(kind)
        return []


class Role:
    """A subject archetype holding permissions and belonging to at most one group."""

    kind = TargetKind.ROLE

    def __init__(self, code: str, config: Any = None) -> None:
        self.code = code
        self.config = config
        self._group: Optional[Group] = None
        self._permissions: List["Permission"] = []

    def __repr__(self) -> str:
        return f"Role({self.code!r})"

    @property
    def group(self) -> Optional[Group]:
        return self._group

    def get_group(self) -> Optional[Group]:
        return self._group

    def assign_group(self, group: Group) -> None:
        """Attach this role to *group*.

        A role already in another group must be moved with
        :meth:`Group.assign_role`; assigning it here raises GroupAssignmentError.
        """
        if self._group is group:
            group._enrol(self)
            return
        if self._group is not None:
            raise GroupAssignmentError(
                f"role {self.code} is already assigned to group {self._group.code}"
            )
        self._group = group
        group._enrol(self)

    def assign_permission(self, permission: "Permission") -> None:
        if _contains(self._permissions, permission):
            return
        if self._group is not None and _contains(self._group.get_permissions(), permission):
            return
        self._permissions.append(permission)

    def get_permissions(self, kind: KindRef = None) -> List["Permission"]:
        """Group permissions of *kind* followed by the role's own."""
        inherited = self._group.get_permissions(kind) if self._group is not None else []
        return inherited + _filter(self._permissions, kind)


__all__ = ["Group", "Role"]
