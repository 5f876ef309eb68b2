# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for descriptor resolution and declaration extraction."""

from __future__ import annotations

import pytest

from ifacecheck.catalog import ClassCatalog
from ifacecheck.config import InterfaceConfig
from ifacecheck.errors import ConformanceError, FailureKind, NoScriptAttachedError
from ifacecheck.hosts import MemoryHost, MemoryObject, MemoryScript
from ifacecheck.resolver import DescriptorResolver, extract_identifier


def make_resolver(host: MemoryHost, **options: object) -> DescriptorResolver:
    return DescriptorResolver(host, ClassCatalog.from_host(host), InterfaceConfig(**options))


def test_descriptor_is_memoized_by_identity(host: MemoryHost, attacker: MemoryScript) -> None:
    resolver = make_resolver(host)

    first = resolver.descriptor_of(attacker)
    second = resolver.descriptor_of(MemoryObject(name="node", script=attacker))

    assert first is second
    assert first.key == "res://actors/attacker.gd"
    assert first.identifier == "Attacker"
    descriptors = resolver.cache_info()[0]
    assert descriptors.current_size == 1
    assert descriptors.hits == 1


def test_descriptor_of_object_without_script_raises(host: MemoryHost) -> None:
    resolver = make_resolver(host)

    with pytest.raises(NoScriptAttachedError):
        resolver.descriptor_of(MemoryObject(name="bare"))


def test_identifier_fallbacks() -> None:
    anonymous = MemoryScript(path="res://anonymous.gd")
    sourceless = MemoryScript(path="res://native.gd", sourceless=True)

    assert extract_identifier(anonymous) == "res://anonymous.gd"
    assert extract_identifier(anonymous, strict=True) == ""
    assert extract_identifier(sourceless) == "Unknown"


def test_declared_interfaces_resolve_names(host: MemoryHost, attacker: MemoryScript, damagable: MemoryScript) -> None:
    resolver = make_resolver(host)

    declared = resolver.declared_interfaces(attacker)

    assert [interface.key for interface in declared] == [damagable.path]
    assert all(interface.is_interface for interface in declared)
    assert resolver.declared_interfaces(attacker) is declared


def test_declared_interfaces_accept_handles_and_single_entries(damagable: MemoryScript) -> None:
    implementor = MemoryScript(path="res://crate.gd", constants={"implements": damagable})
    resolver = make_resolver(MemoryHost([damagable, implementor]))

    declared = resolver.declared_interfaces(implementor)

    assert [interface.key for interface in declared] == [damagable.path]


def test_script_without_implements_declares_nothing(host: MemoryHost, damagable: MemoryScript) -> None:
    resolver = make_resolver(host)

    assert resolver.declared_interfaces(damagable) == ()


def test_string_names_can_be_disallowed(host: MemoryHost, attacker: MemoryScript) -> None:
    resolver = make_resolver(host, allow_string_classes=False)

    with pytest.raises(ConformanceError) as excinfo:
        resolver.declared_interfaces(attacker)

    assert excinfo.value.failure.kind is FailureKind.STRING_NAMES_DISALLOWED


def test_strict_naming_rejects_missing_prefix() -> None:
    interface = MemoryScript(path="res://damagable.gd", class_name="Damagable", signals=("damage",))
    implementor = MemoryScript(path="res://crate.gd", constants={"implements": ["Damagable"]})
    resolver = make_resolver(MemoryHost([interface, implementor]), strict_interface_name=True)

    with pytest.raises(ConformanceError) as excinfo:
        resolver.declared_interfaces(implementor)

    failure = excinfo.value.failure
    assert failure.kind is FailureKind.NAME_PREFIX
    assert failure.interface == "Damagable"
    assert "must start with 'I'" in str(excinfo.value)


def test_unregistered_names_are_fatal(damagable: MemoryScript) -> None:
    implementor = MemoryScript(path="res://crate.gd", constants={"implements": ["IMissing"]})
    resolver = make_resolver(MemoryHost([damagable, implementor]))

    with pytest.raises(ConformanceError) as excinfo:
        resolver.declared_interfaces(implementor)

    assert excinfo.value.failure.kind is FailureKind.UNREGISTERED


def test_loader_cached_paths_resolve_without_registration() -> None:
    interface = MemoryScript(path="res://IAnonymous.gd", signals=("ping",))
    implementor = MemoryScript(path="res://crate.gd", constants={"implements": ["res://IAnonymous.gd"]})
    resolver = make_resolver(MemoryHost([interface, implementor]))

    declared = resolver.declared_interfaces(implementor)

    assert [interface.key for interface in declared] == ["res://IAnonymous.gd"]


def test_invalid_entries_are_fatal(damagable: MemoryScript) -> None:
    implementor = MemoryScript(path="res://crate.gd", constants={"implements": [42]})
    resolver = make_resolver(MemoryHost([damagable, implementor]))

    with pytest.raises(ConformanceError) as excinfo:
        resolver.declared_interfaces(implementor)

    assert excinfo.value.failure.kind is FailureKind.INVALID_ENTRY


class CountingHost(MemoryHost):
    def __init__(self, scripts: list[MemoryScript]) -> None:
        super().__init__(scripts)
        self.loads: list[str] = []

    def load_script_at(self, path: str) -> MemoryScript:
        self.loads.append(path)
        return super().load_script_at(path)


def test_strict_naming_requires_registration_before_loading() -> None:
    unregistered = MemoryScript(path="IMissing", signals=("ping",))
    implementor = MemoryScript(path="res://crate.gd", constants={"implements": ["IMissing"]})
    lenient_host = CountingHost([unregistered, implementor])
    strict_host = CountingHost([unregistered, implementor])

    assert [interface.key for interface in make_resolver(lenient_host).declared_interfaces(implementor)] == ["IMissing"]

    resolver = make_resolver(strict_host, strict_interface_name=True)
    with pytest.raises(ConformanceError) as excinfo:
        resolver.declared_interfaces(implementor)

    assert excinfo.value.failure.kind is FailureKind.UNREGISTERED
    assert excinfo.value.failure.interface == "IMissing"
    assert strict_host.loads == []


def test_strict_naming_accepts_registered_prefixed_names(
    host: MemoryHost,
    attacker: MemoryScript,
    damagable: MemoryScript,
) -> None:
    resolver = make_resolver(host, strict_interface_name=True)

    declared = resolver.declared_interfaces(attacker)

    assert [interface.key for interface in declared] == [damagable.path]


def test_interface_names_resolve_once(damagable: MemoryScript, attacker: MemoryScript) -> None:
    host = CountingHost([damagable, attacker])
    resolver = make_resolver(host)

    first = resolver.resolve_interface("IDamagable", implementor="Attacker")
    second = resolver.resolve_interface("IDamagable", implementor="Crate")

    assert first is second
    assert first.is_interface
    assert host.loads == [damagable.path]
    assert resolver.cache_info()[3].hits == 1


def test_rejected_names_are_not_recorded(damagable: MemoryScript) -> None:
    resolver = make_resolver(MemoryHost([damagable]), strict_interface_name=True)

    for _ in range(2):
        with pytest.raises(ConformanceError):
            resolver.resolve_interface("Damagable", implementor="Crate")

    assert resolver.cache_info()[3].current_size == 0
