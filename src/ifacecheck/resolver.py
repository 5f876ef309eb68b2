# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve scripts into descriptors and extract their declarations."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import replace
from functools import partial
from typing import Final, NoReturn

from .cache import CacheInfo, InsertOnlyCache
from .catalog import ClassCatalog
from .config import InterfaceConfig
from .errors import ConformanceError, ConformanceFailure, FailureKind, NoScriptAttachedError
from .interfaces import HostRuntime, ScriptHandle
from .models import UNKNOWN_IDENTIFIER, ScriptDescriptor

LOGGER = logging.getLogger(__name__)

IMPLEMENTS_CONSTANT: Final[str] = "implements"
CLASS_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\s*class_name\s+([A-Za-z_][A-Za-z0-9_]*)", re.MULTILINE)


def identity_key(script: ScriptHandle) -> str:
    """Return the stable identity of ``script``.

    Args:
        script: Host script handle.

    Returns:
        str: The defining path, or an id-based key for scripts without one.
    """

    path = script.defining_path()
    return path if path else f"<script:{id(script):x}>"


def extract_identifier(script: ScriptHandle, *, strict: bool = False) -> str:
    """Return the class name declared by ``script``.

    Args:
        script: Host script handle.
        strict: Return an empty string instead of the defining path when the
            source declares no class name.

    Returns:
        str: Declared class name, the fallback described above, or
        ``"Unknown"`` when the script exposes no source.
    """

    if not script.has_source_text():
        return UNKNOWN_IDENTIFIER
    match = CLASS_NAME_PATTERN.search(script.source_text())
    if match is not None:
        return match.group(1)
    return "" if strict else script.defining_path()


class DescriptorResolver:
    """Resolve handles to descriptors and memoize their declarations.

    Four insert-only tables back the resolver: descriptors and identifiers
    keyed by script identity, declared interface lists keyed by the
    implementor's identity, and interfaces resolved from class names. Names
    that fail the naming rules are never recorded.
    """

    def __init__(self, host: HostRuntime, catalog: ClassCatalog, config: InterfaceConfig) -> None:
        """Create a resolver.

        Args:
            host: Host object model used to resolve and load scripts.
            catalog: Registered classes used to resolve interface names.
            config: Options governing string-form interface names.
        """

        self._host = host
        self._catalog = catalog
        self._config = config
        self._descriptors: InsertOnlyCache[str, ScriptDescriptor] = InsertOnlyCache("descriptors")
        self._identifiers: InsertOnlyCache[tuple[str, bool], str] = InsertOnlyCache("identifiers")
        self._interfaces: InsertOnlyCache[str, tuple[ScriptDescriptor, ...]] = InsertOnlyCache("declared-interfaces")
        self._names: InsertOnlyCache[str, ScriptDescriptor] = InsertOnlyCache("interface-names")

    def script_of(self, handle: object) -> ScriptHandle:
        """Return the script behind ``handle``.

        Args:
            handle: Script handle, descriptor or host object.

        Returns:
            ScriptHandle: The script itself or the script attached to ``handle``.

        Raises:
            NoScriptAttachedError: If ``handle`` has no attached script.
        """

        if isinstance(handle, ScriptDescriptor):
            return handle.script
        if isinstance(handle, ScriptHandle):
            return handle
        script = self._host.script_of(handle)
        if script is None:
            raise NoScriptAttachedError(handle)
        return script

    def descriptor_of(self, handle: object) -> ScriptDescriptor:
        """Return the memoized descriptor for ``handle``.

        Args:
            handle: Script handle, descriptor or host object.

        Returns:
            ScriptDescriptor: Descriptor cached under the script's identity.
        """

        if isinstance(handle, ScriptDescriptor):
            return handle
        script = self.script_of(handle)
        key = identity_key(script)
        return self._descriptors.get_or_compute(key, partial(self._build_descriptor, script, key))

    def identifier_of(self, handle: object, *, strict: bool = False) -> str:
        """Return the memoized declared identifier of ``handle``.

        Args:
            handle: Script handle, descriptor or host object.
            strict: Return ``""`` rather than the defining path when no class
                name is declared.

        Returns:
            str: Declared identifier.
        """

        script = self.script_of(handle)
        key = (identity_key(script), strict)
        return self._identifiers.get_or_compute(key, partial(extract_identifier, script, strict=strict))

    def display_name(self, interface: ScriptDescriptor) -> str:
        """Return the name used for ``interface`` in diagnostics."""

        return self.identifier_of(interface, strict=True) or interface.key

    def declared_interfaces(self, handle: object) -> tuple[ScriptDescriptor, ...]:
        """Return the interfaces ``handle`` declares through ``implements``.

        Args:
            handle: Script handle, descriptor or host object.

        Returns:
            tuple[ScriptDescriptor, ...]: Interface descriptors in declaration
            order; empty when the script declares nothing.

        Raises:
            ConformanceError: If a declared entry violates the naming rules.
        """

        descriptor = self.descriptor_of(handle)
        return self._interfaces.get_or_compute(descriptor.key, partial(self._extract_interfaces, descriptor))

    def resolve_interface(self, entry: object, *, implementor: str) -> ScriptDescriptor:
        """Resolve an interface reference into an interface descriptor.

        Args:
            entry: Class name, script handle or descriptor.
            implementor: Identifier of the declaring script, used in diagnostics.

        Returns:
            ScriptDescriptor: Descriptor flagged as an interface.

        Raises:
            ConformanceError: If ``entry`` is unsupported or a string name
                violates the configured naming rules.
        """

        if isinstance(entry, str):
            return self._names.get_or_compute(entry, partial(self._interface_for_name, entry, implementor))
        if isinstance(entry, ScriptDescriptor):
            descriptor = entry
        elif isinstance(entry, ScriptHandle):
            descriptor = self.descriptor_of(entry)
        else:
            self._raise(FailureKind.INVALID_ENTRY, implementor, str(entry), member=str(entry))
        return _as_interface(descriptor)

    def cache_info(self) -> tuple[CacheInfo, ...]:
        """Return statistics for every resolver table."""

        return (
            self._descriptors.cache_info(),
            self._identifiers.cache_info(),
            self._interfaces.cache_info(),
            self._names.cache_info(),
        )

    def _build_descriptor(self, script: ScriptHandle, key: str) -> ScriptDescriptor:
        has_source = script.has_source_text()
        return ScriptDescriptor(
            key=key,
            script=script,
            has_source=has_source,
            source=script.source_text() if has_source else None,
            identifier=self.identifier_of(script),
        )

    def _extract_interfaces(self, descriptor: ScriptDescriptor) -> tuple[ScriptDescriptor, ...]:
        constants = descriptor.script.constant_members()
        if IMPLEMENTS_CONSTANT not in constants:
            return ()
        declared = constants[IMPLEMENTS_CONSTANT]
        entries = list(declared) if isinstance(declared, Sequence) and not isinstance(declared, str) else [declared]
        resolved: list[ScriptDescriptor] = []
        for entry in entries:
            interface = self.resolve_interface(entry, implementor=descriptor.identifier)
            if interface not in resolved:
                resolved.append(interface)
        LOGGER.debug("%s declares %d interface(s)", descriptor.identifier, len(resolved))
        return tuple(resolved)

    def _interface_for_name(self, name: str, implementor: str) -> ScriptDescriptor:
        return _as_interface(self.descriptor_of(self._script_for_name(name, implementor=implementor)))

    def _script_for_name(self, name: str, *, implementor: str) -> ScriptHandle:
        config = self._config
        if not config.allow_string_classes:
            self._raise(FailureKind.STRING_NAMES_DISALLOWED, implementor, name)
        if config.strict_interface_name:
            if not name.startswith(config.interface_prefix):
                self._raise(FailureKind.NAME_PREFIX, implementor, name, member=config.interface_prefix)
            if name not in self._catalog:
                self._raise(FailureKind.UNREGISTERED, implementor, name)
        if self._host.exists_as_script(name):
            return self._host.load_script_at(name)
        path = self._catalog.resolve(name)
        if path is None:
            self._raise(FailureKind.UNREGISTERED, implementor, name)
        return self._host.load_script_at(path)

    @staticmethod
    def _raise(kind: FailureKind, implementor: str, interface: str, *, member: str | None = None) -> NoReturn:
        raise ConformanceError(
            ConformanceFailure(kind=kind, implementor=implementor, interface=interface, member=member),
        )


def _as_interface(descriptor: ScriptDescriptor) -> ScriptDescriptor:
    return descriptor if descriptor.is_interface else replace(descriptor, is_interface=True)


__all__ = [
    "CLASS_NAME_PATTERN",
    "IMPLEMENTS_CONSTANT",
    "DescriptorResolver",
    "extract_identifier",
    "identity_key",
]
