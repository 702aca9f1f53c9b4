from __future__ import annotations


class AccessControlError(Exception):
    """Base class for configuration errors raised by accessctl.

    Authorization denials are never raised; they are returned as
    :class:`accessctl.core.model.PermissionMessage` values.
    """


class GroupAssignmentError(AccessControlError):
    """A role was assigned directly to a second group."""


class HierarchyCycleError(AccessControlError):
    """Group inheritance would form a cycle."""


class PatternError(AccessControlError, ValueError):
    """A rule pattern could not be compiled."""


class RuleShapeError(AccessControlError, ValueError):
    """A rule or permission does not fit the shape of its permission kind."""


class RegistrationError(AccessControlError):
    """A different role or group is already registered under the same code."""


class PolicyDocumentError(AccessControlError, ValueError):
    """A configuration document is malformed."""


__all__ = [
    "AccessControlError",
    "GroupAssignmentError",
    "HierarchyCycleError",
    "PatternError",
    "RuleShapeError",
    "RegistrationError",
    "PolicyDocumentError",
]
