# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""In-memory host whose scripts are described with plain Python data."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ..catalog import ClassCatalogEntry
from ..interfaces import ScriptHandle


@dataclass(eq=False)
class MemoryScript:
    """Script assembled from declared member names.

    Source text is synthesised from the declarations so the class-name
    extraction behaves as it does for scripts read from disk. ``sourceless``
    scripts report no source at all.
    """

    path: str
    class_name: str | None = None
    signals: tuple[str, ...] = ()
    methods: tuple[str, ...] = ()
    constants: Mapping[str, Any] = field(default_factory=dict)
    sourceless: bool = False

    def has_source_text(self) -> bool:
        return not self.sourceless

    def source_text(self) -> str:
        lines: list[str] = []
        if self.class_name:
            lines.append(f"class_name {self.class_name}")
        lines.extend(f"const {name} = {_render_constant(value)}" for name, value in self.constants.items())
        lines.extend(f"signal {name}" for name in self.signals)
        lines.extend(f"func {name}():\n\tpass" for name in self.methods)
        return "\n".join(lines) + "\n"

    def constant_members(self) -> Mapping[str, Any]:
        return MappingProxyType(dict(self.constants))

    def declared_signal_names(self) -> tuple[str, ...]:
        return self.signals

    def declared_method_names(self) -> tuple[str, ...]:
        return self.methods

    def defining_path(self) -> str:
        return self.path


def _render_constant(value: object) -> str:
    if isinstance(value, MemoryScript):
        return f'preload("{value.path}")'
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_render_constant(item) for item in value) + "]"
    return repr(value)


@dataclass(eq=False)
class MemoryObject:
    """Object instance optionally carrying a script."""

    name: str
    script: ScriptHandle | None = None


class MemoryHost:
    """Host object model backed by a dictionary of scripts keyed by path."""

    def __init__(self, scripts: Iterable[MemoryScript] = (), *, editor: bool = True) -> None:
        """Create a host holding ``scripts``.

        Args:
            scripts: Scripts available to ``load_script_at``; those with a
                ``class_name`` are registered globally.
            editor: Value reported by :meth:`is_editor`.
        """

        self._scripts: dict[str, MemoryScript] = {}
        self.editor = editor
        for script in scripts:
            self.add(script)

    def add(self, script: MemoryScript) -> MemoryScript:
        """Register ``script`` under its path and return it."""

        self._scripts[script.path] = script
        return script

    def get_global_class_list(self) -> list[ClassCatalogEntry]:
        return [
            ClassCatalogEntry(class_name=script.class_name, path=script.path)
            for script in self._scripts.values()
            if script.class_name
        ]

    def script_of(self, obj: object) -> ScriptHandle | None:
        return getattr(obj, "script", None)

    def load_script_at(self, path: str) -> MemoryScript:
        try:
            return self._scripts[path]
        except KeyError as exc:
            raise FileNotFoundError(f"No script registered at {path}") from exc

    def exists_as_script(self, name: str) -> bool:
        return name in self._scripts

    def is_editor(self) -> bool:
        return self.editor


__all__ = ["MemoryHost", "MemoryObject", "MemoryScript"]
