# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Interfaces for the host object model consumed by the conformance engine."""

# pylint: disable=too-few-public-methods -- Protocol definitions intentionally expose minimal method surfaces.

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class GlobalClassEntry(Protocol):
    """Entry of the host's registered-class listing."""

    class_name: str
    path: str


@runtime_checkable
class ScriptHandle(Protocol):
    """Reflection surface exposed by a loaded script."""

    def has_source_text(self) -> bool:
        """Return whether the script exposes its source text."""

        raise NotImplementedError

    def source_text(self) -> str:
        """Return the script's source text."""

        raise NotImplementedError

    def constant_members(self) -> Mapping[str, Any]:
        """Return the constants declared directly on the script."""

        raise NotImplementedError

    def declared_signal_names(self) -> Sequence[str]:
        """Return the names of signals declared directly on the script."""

        raise NotImplementedError

    def declared_method_names(self) -> Sequence[str]:
        """Return the names of methods declared directly on the script."""

        raise NotImplementedError

    def defining_path(self) -> str:
        """Return the resource path the script was loaded from."""

        raise NotImplementedError


@runtime_checkable
class HostRuntime(Protocol):
    """Host services used to seed the catalog and resolve scripts."""

    def get_global_class_list(self) -> Sequence[GlobalClassEntry]:
        """Return every globally registered class and its defining path."""

        raise NotImplementedError

    def script_of(self, obj: object) -> ScriptHandle | None:
        """Return the script attached to ``obj`` or ``None``."""

        raise NotImplementedError

    def load_script_at(self, path: str) -> ScriptHandle:
        """Load and return the script stored at ``path``."""

        raise NotImplementedError

    def exists_as_script(self, name: str) -> bool:
        """Return whether ``name`` is a path the host already holds a script for."""

        raise NotImplementedError

    def is_editor(self) -> bool:
        """Return whether the host runs in an authoring context."""

        raise NotImplementedError


__all__ = ["GlobalClassEntry", "HostRuntime", "ScriptHandle"]
