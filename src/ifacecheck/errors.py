# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exceptions and failure payloads raised by the conformance engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final


class FailureKind(str, Enum):
    """Enumerate the reasons a declaration or conformance check can fail."""

    STRING_NAMES_DISALLOWED = "string-names-disallowed"
    NAME_PREFIX = "name-prefix"
    UNREGISTERED = "unregistered"
    INVALID_ENTRY = "invalid-entry"
    INTERFACE_HAS_CONSTANTS = "interface-has-constants"
    MISSING_SOURCE = "missing-source"
    MISSING_SIGNAL = "missing-signal"
    MISSING_METHOD = "missing-method"
    NOT_DECLARED = "not-declared"

    @property
    def is_configuration(self) -> bool:
        """Return whether the failure is a configuration error.

        Returns:
            bool: ``True`` when the failure is raised regardless of the caller's
            failure policy.
        """

        return self in CONFIGURATION_KINDS


CONFIGURATION_KINDS: Final[frozenset[FailureKind]] = frozenset(
    {
        FailureKind.STRING_NAMES_DISALLOWED,
        FailureKind.NAME_PREFIX,
        FailureKind.UNREGISTERED,
        FailureKind.INVALID_ENTRY,
        FailureKind.INTERFACE_HAS_CONSTANTS,
    },
)


@dataclass(frozen=True, slots=True)
class ConformanceFailure:
    """Describe a single failed check.

    Attributes:
        kind: Category of the failure.
        implementor: Identifier of the script under inspection.
        interface: Identifier (or declared name) of the interface involved.
        member: Missing member or offending name, when applicable.
    """

    kind: FailureKind
    implementor: str
    interface: str
    member: str | None = None

    def describe(self) -> str:
        """Return a human-readable diagnostic for the failure.

        Returns:
            str: Message naming the implementor, the interface and, for member
            mismatches, the missing member.
        """

        kind = self.kind
        if kind is FailureKind.STRING_NAMES_DISALLOWED:
            return (
                f"{self.implementor}: interface '{self.interface}' is declared by name "
                "but string class names are disabled"
            )
        if kind is FailureKind.NAME_PREFIX:
            return (
                f"{self.implementor}: interface name '{self.interface}' must start with "
                f"'{self.member}'"
            )
        if kind is FailureKind.UNREGISTERED:
            return f"{self.implementor}: interface '{self.interface}' is not a registered class"
        if kind is FailureKind.INVALID_ENTRY:
            return f"{self.implementor}: unsupported implements entry {self.member}"
        if kind is FailureKind.INTERFACE_HAS_CONSTANTS:
            return f"Interface '{self.interface}' must not declare constants (found '{self.member}')"
        if kind is FailureKind.MISSING_SOURCE:
            return f"{self.implementor} has no source and cannot implement '{self.interface}'"
        if kind is FailureKind.MISSING_SIGNAL:
            return f"{self.implementor} does not implement signal '{self.member}' of '{self.interface}'"
        if kind is FailureKind.MISSING_METHOD:
            return f"{self.implementor} does not implement method '{self.member}' of '{self.interface}'"
        return f"{self.implementor} does not declare that it implements '{self.interface}'"


class InterfaceError(RuntimeError):
    """Base class for errors raised by the conformance engine."""


class ConformanceError(InterfaceError):
    """Raised for fatal conformance and configuration violations."""

    def __init__(self, failure: ConformanceFailure) -> None:
        """Create an error wrapping ``failure``.

        Args:
            failure: Structured description of the violation.
        """

        super().__init__(failure.describe())
        self.failure = failure


class NoScriptAttachedError(InterfaceError):
    """Raised when an object without an attached script is inspected."""

    def __init__(self, obj: object) -> None:
        super().__init__(f"No script attached to {obj!r}")
        self.obj = obj


class ConfigError(InterfaceError):
    """Raised when configuration input is invalid."""


__all__ = [
    "CONFIGURATION_KINDS",
    "ConfigError",
    "ConformanceError",
    "ConformanceFailure",
    "FailureKind",
    "InterfaceError",
    "NoScriptAttachedError",
]
