# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Structural conformance checks between implementors and interfaces."""

from __future__ import annotations

import logging

from .cache import CacheInfo, InsertOnlyCache
from .errors import ConformanceError, ConformanceFailure, FailureKind
from .models import FailurePolicy, ScriptDescriptor
from .resolver import DescriptorResolver

LOGGER = logging.getLogger(__name__)


class ConformanceChecker:
    """Compare directly declared signals and methods against an interface.

    Results are memoized per ordered ``(implementor, interface)`` identity pair.
    A cached result is returned as-is whatever failure policy a later call
    requests.
    """

    def __init__(self, resolver: DescriptorResolver) -> None:
        """Create a checker backed by ``resolver``.

        Args:
            resolver: Resolver used to obtain descriptors and identifiers.
        """

        self._resolver = resolver
        self._results: InsertOnlyCache[tuple[str, str], bool] = InsertOnlyCache("conformance")

    def check(
        self,
        implementor: object,
        interface: object,
        on_failure: FailurePolicy = FailurePolicy.FATAL,
    ) -> bool:
        """Return whether ``implementor`` conforms to ``interface``.

        Args:
            implementor: Script handle, descriptor or host object.
            interface: Script handle or descriptor of the interface.
            on_failure: ``FATAL`` raises on a mismatch, ``SOFT`` returns ``False``.

        Returns:
            bool: ``True`` when every declared signal and method of the
            interface is declared by the implementor.

        Raises:
            ConformanceError: On a mismatch under ``FATAL``, and always when the
                interface declares constants.
        """

        impl = self._resolver.descriptor_of(implementor)
        iface = self._resolver.descriptor_of(interface)
        key = (impl.key, iface.key)
        cached = self._results.lookup(key)
        if cached is not None:
            return cached

        failure = self.evaluate(impl, iface)
        if failure is not None and failure.kind.is_configuration:
            raise ConformanceError(failure)
        result = self._results.insert(key, failure is None)
        if failure is None:
            return result
        if on_failure is FailurePolicy.FATAL:
            raise ConformanceError(failure)
        LOGGER.debug("Soft conformance failure: %s", failure.describe())
        return False

    def evaluate(self, implementor: ScriptDescriptor, interface: ScriptDescriptor) -> ConformanceFailure | None:
        """Compare ``implementor`` against ``interface`` without caching.

        Args:
            implementor: Descriptor of the implementing script.
            interface: Descriptor of the interface.

        Returns:
            ConformanceFailure | None: The first failure found, or ``None``.
        """

        if not interface.has_source:
            return None
        interface_name = self._resolver.display_name(interface)
        if not implementor.has_source:
            return ConformanceFailure(FailureKind.MISSING_SOURCE, implementor.identifier, interface_name)

        constants = interface.script.constant_members()
        if constants:
            return ConformanceFailure(
                FailureKind.INTERFACE_HAS_CONSTANTS,
                implementor.identifier,
                interface_name,
                member=next(iter(constants)),
            )

        signals = set(implementor.script.declared_signal_names())
        for name in interface.script.declared_signal_names():
            if name not in signals:
                return ConformanceFailure(FailureKind.MISSING_SIGNAL, implementor.identifier, interface_name, name)

        methods = set(implementor.script.declared_method_names())
        for name in interface.script.declared_method_names():
            if name not in methods:
                return ConformanceFailure(FailureKind.MISSING_METHOD, implementor.identifier, interface_name, name)
        return None

    def cache_info(self) -> CacheInfo:
        """Return statistics for the conformance table."""

        return self._results.cache_info()


__all__ = ["ConformanceChecker"]
