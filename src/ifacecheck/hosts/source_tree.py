# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Host backed by a directory of GDScript-style source files.

Only top-level declarations are read: ``class_name``, ``signal``, ``func``,
``const``, ``enum`` and inner ``class`` blocks. Indented lines belong to
function bodies or inner classes and never count as members of the file's own
script. Resource paths use the ``res://`` scheme rooted at the project
directory. An unnamed ``enum`` contributes each enumerator as a constant.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Final

from ..catalog import ClassCatalogEntry
from ..config import InterfaceConfig
from ..discovery import SourceScanner
from ..resolver import CLASS_NAME_PATTERN, IMPLEMENTS_CONSTANT

LOGGER = logging.getLogger(__name__)

RESOURCE_SCHEME: Final[str] = "res://"

_IDENTIFIER: Final[str] = r"[A-Za-z_][A-Za-z0-9_]*"
_SIGNAL_PATTERN: Final[re.Pattern[str]] = re.compile(rf"^signal\s+({_IDENTIFIER})", re.MULTILINE)
_METHOD_PATTERN: Final[re.Pattern[str]] = re.compile(rf"^(?:static\s+)?func\s+({_IDENTIFIER})", re.MULTILINE)
_CONST_PATTERN: Final[re.Pattern[str]] = re.compile(rf"^const\s+({_IDENTIFIER})\s*(?::[^=\n]*)?=\s*", re.MULTILINE)
_ENUM_PATTERN: Final[re.Pattern[str]] = re.compile(rf"^enum\s+({_IDENTIFIER})", re.MULTILINE)
_UNNAMED_ENUM_PATTERN: Final[re.Pattern[str]] = re.compile(r"^enum\s*(?=\{)", re.MULTILINE)
_INNER_CLASS_PATTERN: Final[re.Pattern[str]] = re.compile(rf"^class\s+({_IDENTIFIER})", re.MULTILINE)
_STRING_PATTERN: Final[re.Pattern[str]] = re.compile(r"""^(?:"([^"]*)"|'([^']*)')$""")
_LOAD_PATTERN: Final[re.Pattern[str]] = re.compile(r"""^(?:pre)?load\(\s*(?:"([^"]*)"|'([^']*)')\s*\)$""")
_BARE_IDENTIFIER: Final[re.Pattern[str]] = re.compile(rf"^{_IDENTIFIER}$")

_OPENERS: Final[str] = "([{"
_CLOSERS: Final[str] = ")]}"


@dataclass(frozen=True, slots=True)
class UnresolvedConstant:
    """Constant expression that does not evaluate to a string or script."""

    expression: str

    def __str__(self) -> str:
        return self.expression


def read_expression(source: str, start: int) -> str:
    """Return the expression beginning at ``start``.

    The expression ends at the first newline outside brackets and string
    literals, or at a trailing ``#`` comment.

    Args:
        source: Complete source text.
        start: Offset of the first character of the expression.

    Returns:
        str: Expression text with surrounding whitespace removed.
    """

    depth = 0
    quote: str | None = None
    index = start
    while index < len(source):
        char = source[index]
        if quote is not None:
            if char == "\\":
                index += 1
            elif char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth = max(depth - 1, 0)
        elif char == "#":
            if depth == 0:
                break
            newline = source.find("\n", index)
            index = len(source) if newline == -1 else newline
            continue
        elif char == "\n" and depth == 0:
            break
        index += 1
    return source[start:index].strip()


def split_elements(expression: str) -> list[str]:
    """Split an array literal into its top-level element expressions.

    Args:
        expression: Array literal such as ``["IFoo", preload("res://b.gd")]``.

    Returns:
        list[str]: Element expressions; a non-array expression is returned as
        the only element.
    """

    text = expression.strip()
    if not (text.startswith("[") and text.endswith("]")):
        return [text] if text else []
    return _split_top_level(text[1:-1])


def enumerator_values(block: str) -> dict[str, Any]:
    """Return the enumerators of an ``enum`` body such as ``{ A, B = 4, C }``.

    Implicit values continue from the previous integer value. An explicit value
    that is not an integer literal is kept as expression text and leaves the
    following implicit values unchanged.

    Args:
        block: Braced enum body.

    Returns:
        dict[str, Any]: Enumerator names mapped to their values.
    """

    text = block.strip()
    if not (text.startswith("{") and text.endswith("}")):
        return {}
    values: dict[str, Any] = {}
    following = 0
    for element in _split_top_level(text[1:-1]):
        name, _, value = element.partition("=")
        name = name.strip()
        if not _BARE_IDENTIFIER.match(name):
            continue
        value = value.strip()
        if value:
            try:
                following = int(value, 0)
            except ValueError:
                values[name] = value
                continue
        values[name] = following
        following += 1
    return values


def _split_top_level(body: str) -> list[str]:
    elements: list[str] = []
    depth = 0
    quote: str | None = None
    current: list[str] = []
    in_comment = False
    for char in body:
        if in_comment:
            in_comment = char != "\n"
            continue
        if quote is not None:
            if char == quote:
                quote = None
            current.append(char)
            continue
        if char in "\"'":
            quote = char
        elif char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
        elif char == "," and depth == 0:
            elements.append("".join(current).strip())
            current = []
            continue
        elif char == "#":
            in_comment = True
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail:
        elements.append(tail)
    return [element for element in elements if element]


class SourceScript:
    """Script read from a source file under the project root."""

    def __init__(self, resource_path: str, source: str, host: SourceTreeHost) -> None:
        self._path = resource_path
        self._source = source
        self._host = host
        self._constants: Mapping[str, Any] | None = None

    def __repr__(self) -> str:
        return f"SourceScript({self._path!r})"

    def has_source_text(self) -> bool:
        return True

    def source_text(self) -> str:
        return self._source

    def defining_path(self) -> str:
        return self._path

    @property
    def class_name(self) -> str | None:
        """Return the ``class_name`` declared by the file, if any."""

        match = CLASS_NAME_PATTERN.search(self._source)
        return match.group(1) if match else None

    def declared_signal_names(self) -> tuple[str, ...]:
        return tuple(_SIGNAL_PATTERN.findall(self._source))

    def declared_method_names(self) -> tuple[str, ...]:
        return tuple(_METHOD_PATTERN.findall(self._source))

    def constant_members(self) -> Mapping[str, Any]:
        """Return top-level constants, enums and inner classes.

        The ``implements`` constant is evaluated into class names and scripts;
        other constants map to their unevaluated expression text.
        """

        if self._constants is None:
            self._constants = MappingProxyType(self._parse_constants())
        return self._constants

    def _parse_constants(self) -> dict[str, Any]:
        constants: dict[str, Any] = {}
        for match in _CONST_PATTERN.finditer(self._source):
            name = match.group(1)
            expression = read_expression(self._source, match.end())
            if name == IMPLEMENTS_CONSTANT:
                constants[name] = [self._evaluate(element) for element in split_elements(expression)]
            else:
                constants[name] = expression
        for match in _UNNAMED_ENUM_PATTERN.finditer(self._source):
            for name, value in enumerator_values(read_expression(self._source, match.end())).items():
                constants.setdefault(name, value)
        for pattern in (_ENUM_PATTERN, _INNER_CLASS_PATTERN):
            for match in pattern.finditer(self._source):
                constants.setdefault(match.group(1), UnresolvedConstant(match.group(0)))
        return constants

    def _evaluate(self, element: str) -> Any:
        string = _STRING_PATTERN.match(element)
        if string is not None:
            return string.group(1) if string.group(1) is not None else string.group(2)
        loaded = _LOAD_PATTERN.match(element)
        if loaded is not None:
            path = loaded.group(1) if loaded.group(1) is not None else loaded.group(2)
            return self._load(path, element)
        if _BARE_IDENTIFIER.match(element):
            path = self._host.class_path(element)
            if path is not None:
                return self._load(path, element)
        LOGGER.debug("%s: cannot evaluate implements entry %s", self._path, element)
        return UnresolvedConstant(element)

    def _load(self, path: str, element: str) -> SourceScript | UnresolvedConstant:
        try:
            return self._host.load_script_at(path)
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("%s: cannot load implements entry %s: %s", self._path, element, exc)
            return UnresolvedConstant(element)


class SourceTreeHost:
    """Host object model reading scripts from ``root``."""

    def __init__(self, root: Path, *, config: InterfaceConfig | None = None, editor: bool = True) -> None:
        """Create a host for the project at ``root``.

        Args:
            root: Project directory that ``res://`` paths resolve against.
            config: Options supplying ignored directories and source suffixes
                for the global class scan.
            editor: Value reported by :meth:`is_editor`.
        """

        self.root = root.resolve()
        self.config = config or InterfaceConfig(project_root=self.root)
        self.editor = editor
        self._scripts: dict[str, SourceScript] = {}
        self._classes: list[ClassCatalogEntry] | None = None

    def to_resource_path(self, path: str | Path) -> str:
        """Return the ``res://`` path for ``path`` when it lies under the root."""

        text = str(path)
        if text.startswith(RESOURCE_SCHEME):
            return text
        candidate = Path(text)
        if not candidate.is_absolute():
            candidate = self.root / candidate
        candidate = candidate.resolve()
        try:
            relative = candidate.relative_to(self.root)
        except ValueError:
            return candidate.as_posix()
        return f"{RESOURCE_SCHEME}{relative.as_posix()}"

    def to_filesystem_path(self, resource_path: str) -> Path:
        """Return the file backing ``resource_path``."""

        if resource_path.startswith(RESOURCE_SCHEME):
            return self.root / resource_path[len(RESOURCE_SCHEME) :]
        return Path(resource_path)

    def load_script_at(self, path: str) -> SourceScript:
        """Load the script at ``path``, reusing a previously loaded instance.

        Raises:
            FileNotFoundError: If no file backs ``path``.
            UnicodeDecodeError: If the file is not valid UTF-8.
        """

        resource_path = self.to_resource_path(path)
        cached = self._scripts.get(resource_path)
        if cached is not None:
            return cached
        source = self.to_filesystem_path(resource_path).read_text(encoding="utf-8")
        script = SourceScript(resource_path, source, self)
        self._scripts[resource_path] = script
        return script

    def exists_as_script(self, name: str) -> bool:
        return name.startswith(RESOURCE_SCHEME) and name in self._scripts

    def get_global_class_list(self) -> list[ClassCatalogEntry]:
        """Return every ``class_name`` declared by a source file under the root."""

        if self._classes is None:
            classes: list[ClassCatalogEntry] = []
            for path in SourceScanner().scan(self.root, self.config.ignored_dirs):
                if not self.config.is_source(path):
                    continue
                try:
                    script = self.load_script_at(str(path))
                except (OSError, UnicodeDecodeError) as exc:
                    LOGGER.warning("Skipping %s in the class scan: %s", path, exc)
                    continue
                class_name = script.class_name
                if class_name:
                    classes.append(ClassCatalogEntry(class_name=class_name, path=script.defining_path()))
            self._classes = classes
        return list(self._classes)

    def class_path(self, class_name: str) -> str | None:
        """Return the resource path registering ``class_name``."""

        for entry in self.get_global_class_list():
            if entry.class_name == class_name:
                return entry.path
        return None

    def script_of(self, obj: object) -> SourceScript | None:
        script = getattr(obj, "script", None)
        return script if isinstance(script, SourceScript) else None

    def is_editor(self) -> bool:
        return self.editor


__all__ = [
    "RESOURCE_SCHEME",
    "SourceScript",
    "SourceTreeHost",
    "UnresolvedConstant",
    "enumerator_values",
    "read_expression",
    "split_elements",
]
