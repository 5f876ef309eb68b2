# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data structures shared by the resolver, checker and orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Final

from .interfaces import ScriptHandle

UNKNOWN_IDENTIFIER: Final[str] = "Unknown"


class FailurePolicy(str, Enum):
    """Select how a failed check is reported."""

    FATAL = "fatal"
    SOFT = "soft"

    @classmethod
    def from_flag(cls, assert_on_fail: bool) -> FailurePolicy:
        """Return the policy matching an ``assert_on_fail`` flag."""

        return cls.FATAL if assert_on_fail else cls.SOFT


@dataclass(frozen=True, slots=True)
class ScriptDescriptor:
    """Resolved view of a script used for conformance checks.

    Attributes:
        key: Stable identity of the script, derived from its defining path.
        script: Host handle the descriptor was built from.
        has_source: Whether the script exposes source text.
        source: Source text, when available.
        identifier: Declared class name used in diagnostics.
        is_interface: Whether the descriptor appears as a declared interface.
    """

    key: str
    script: ScriptHandle = field(compare=False, repr=False)
    has_source: bool = field(compare=False)
    source: str | None = field(compare=False, repr=False)
    identifier: str = field(compare=False)
    is_interface: bool = field(default=False, compare=False)


@dataclass(slots=True)
class SweepReport:
    """Summary of a startup validation sweep.

    Attributes:
        root: Project root that was scanned.
        scanned: Source files visited, each exactly once.
        validated: Identifiers of scripts whose declared interfaces passed.
        diagnostics: Scanner and loader diagnostics recorded during the sweep.
    """

    root: Path
    scanned: list[Path] = field(default_factory=list)
    validated: list[str] = field(default_factory=list)
    diagnostics: list[str] = field(default_factory=list)


__all__ = ["UNKNOWN_IDENTIFIER", "FailurePolicy", "ScriptDescriptor", "SweepReport"]
