# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the structural conformance checker."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from ifacecheck.catalog import ClassCatalog
from ifacecheck.checker import ConformanceChecker
from ifacecheck.config import InterfaceConfig
from ifacecheck.errors import ConformanceError, FailureKind
from ifacecheck.hosts import MemoryHost, MemoryScript
from ifacecheck.models import FailurePolicy
from ifacecheck.resolver import DescriptorResolver


@dataclass(eq=False)
class CountingScript(MemoryScript):
    """Memory script recording member introspection calls."""

    introspections: int = 0

    def declared_signal_names(self) -> tuple[str, ...]:
        self.introspections += 1
        return super().declared_signal_names()

    def declared_method_names(self) -> tuple[str, ...]:
        self.introspections += 1
        return super().declared_method_names()


def make_checker(*scripts: MemoryScript) -> ConformanceChecker:
    host = MemoryHost(scripts)
    return ConformanceChecker(DescriptorResolver(host, ClassCatalog.from_host(host), InterfaceConfig()))


def test_members_are_a_superset() -> None:
    implementor = MemoryScript(path="res://impl.gd", signals=("a", "b"), methods=("m",))
    interface = MemoryScript(path="res://IFace.gd", class_name="IFace", signals=("a",), methods=("m",))
    checker = make_checker(implementor, interface)

    assert checker.check(implementor, interface, FailurePolicy.SOFT) is True


def test_missing_signal_fails_softly() -> None:
    implementor = MemoryScript(path="res://impl.gd", signals=("a", "b"), methods=("m",))
    interface = MemoryScript(path="res://IFace.gd", class_name="IFace", signals=("a", "c"), methods=("m",))
    checker = make_checker(implementor, interface)

    assert checker.check(implementor, interface, FailurePolicy.SOFT) is False


def test_missing_signal_is_fatal_and_named() -> None:
    implementor = MemoryScript(path="res://impl.gd", class_name="Impl", signals=("a", "b"), methods=("m",))
    interface = MemoryScript(path="res://IFace.gd", class_name="IFace", signals=("a", "c"), methods=("m",))
    checker = make_checker(implementor, interface)

    with pytest.raises(ConformanceError) as excinfo:
        checker.check(implementor, interface, FailurePolicy.FATAL)

    failure = excinfo.value.failure
    assert failure.kind is FailureKind.MISSING_SIGNAL
    assert failure.member == "c"
    assert "Impl" in str(excinfo.value)
    assert "IFace" in str(excinfo.value)


def test_missing_method_is_reported() -> None:
    implementor = MemoryScript(path="res://impl.gd", signals=("a",))
    interface = MemoryScript(path="res://IFace.gd", class_name="IFace", signals=("a",), methods=("m",))
    host = MemoryHost([implementor, interface])
    resolver = DescriptorResolver(host, ClassCatalog.from_host(host), InterfaceConfig())
    checker = ConformanceChecker(resolver)

    failure = checker.evaluate(resolver.descriptor_of(implementor), resolver.descriptor_of(interface))

    assert failure is not None
    assert failure.kind is FailureKind.MISSING_METHOD
    assert failure.member == "m"


def test_sourceless_interface_always_matches() -> None:
    implementor = MemoryScript(path="res://impl.gd")
    interface = MemoryScript(path="res://native.gd", signals=("x",), sourceless=True)
    checker = make_checker(implementor, interface)

    assert checker.check(implementor, interface, FailurePolicy.SOFT) is True


def test_sourceless_implementor_fails() -> None:
    implementor = MemoryScript(path="res://native.gd", sourceless=True)
    interface = MemoryScript(path="res://IFace.gd", class_name="IFace", signals=("x",))
    checker = make_checker(implementor, interface)

    assert checker.check(implementor, interface, FailurePolicy.SOFT) is False
    with pytest.raises(ConformanceError) as excinfo:
        make_checker(implementor, interface).check(implementor, interface, FailurePolicy.FATAL)
    assert excinfo.value.failure.kind is FailureKind.MISSING_SOURCE
    assert "Unknown" in str(excinfo.value)


def test_interface_with_constants_is_always_fatal() -> None:
    implementor = MemoryScript(path="res://impl.gd", signals=("x",))
    interface = MemoryScript(path="res://IFace.gd", class_name="IFace", signals=("x",), constants={"SPEED": 10})
    checker = make_checker(implementor, interface)

    for _ in range(2):
        with pytest.raises(ConformanceError) as excinfo:
            checker.check(implementor, interface, FailurePolicy.SOFT)
        assert excinfo.value.failure.kind is FailureKind.INTERFACE_HAS_CONSTANTS
        assert excinfo.value.failure.member == "SPEED"


def test_results_are_memoized_per_ordered_pair() -> None:
    implementor = CountingScript(path="res://impl.gd", signals=("a",), methods=("m",))
    interface = CountingScript(path="res://IFace.gd", class_name="IFace", signals=("a",), methods=("m",))
    checker = make_checker(implementor, interface)

    assert checker.check(implementor, interface, FailurePolicy.SOFT) is True
    calls = implementor.introspections + interface.introspections
    assert checker.check(implementor, interface, FailurePolicy.SOFT) is True

    assert implementor.introspections + interface.introspections == calls
    info = checker.cache_info()
    assert info.current_size == 1
    assert info.hits == 1

    checker.check(interface, implementor, FailurePolicy.SOFT)
    assert checker.cache_info().current_size == 2


def test_cached_result_wins_over_later_policy() -> None:
    implementor = MemoryScript(path="res://impl.gd")
    interface = MemoryScript(path="res://IFace.gd", class_name="IFace", signals=("x",))
    checker = make_checker(implementor, interface)

    assert checker.check(implementor, interface, FailurePolicy.SOFT) is False
    assert checker.check(implementor, interface, FailurePolicy.FATAL) is False


def test_inherited_members_are_not_considered() -> None:
    # Only members the host reports as declared on the script itself count.
    base = MemoryScript(path="res://base.gd", signals=("damage",))
    derived = MemoryScript(path="res://derived.gd", methods=("deal_damage",))
    interface = MemoryScript(path="res://IDamagable.gd", class_name="IDamagable", signals=("damage",))
    checker = make_checker(base, derived, interface)

    assert checker.check(derived, interface, FailurePolicy.SOFT) is False
