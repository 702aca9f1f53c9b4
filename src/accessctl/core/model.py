from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

if TYPE_CHECKING:  # pragma: no cover
    from .hierarchy import Group, Role

    Target = Union[Role, Group]


class TargetKind(str, Enum):
    """Discriminant carried by every permission target."""

    ROLE = "role"
    GROUP = "group"


class Status(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class Action:
    """One authorization request.

    ``type`` must equal the kind name of a permission for that permission to
    be consulted. ``parameters`` depend on the kind: ``{"route": ...}`` for
    navigation, ``{"identifier": ..., "action": ...}`` for components and
    ``{"identifier": ..., <kind name>: [...]}`` for list kinds.
    """

    role_code: str
    type: str
    parameters: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.parameters.get(key, default)


@dataclass(frozen=True)
class PermissionMessage:
    status: Status
    message: Optional[str] = None
    target: Optional["Target"] = None
    action: Optional[Action] = None

    @property
    def failed(self) -> bool:
        return self.status is Status.FAILED

    @property
    def allowed(self) -> bool:
        return self.status is Status.SUCCESS

    @classmethod
    def success(cls, action: Optional[Action] = None, target: Optional["Target"] = None) -> "PermissionMessage":
        return cls(status=Status.SUCCESS, target=target, action=action)

    @classmethod
    def failure(
        cls,
        message: str,
        *,
        action: Optional[Action] = None,
        target: Optional["Target"] = None,
    ) -> "PermissionMessage":
        return cls(status=Status.FAILED, message=message, target=target, action=action)


__all__ = ["TargetKind", "Status", "Action", "PermissionMessage"]
