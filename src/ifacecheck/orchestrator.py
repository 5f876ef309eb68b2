# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Public entry points: ``implements``, ``implementations`` and the startup sweep."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .catalog import ClassCatalog
from .checker import ConformanceChecker
from .config import InterfaceConfig
from .discovery import SourceScanner
from .errors import ConformanceError, ConformanceFailure, FailureKind, NoScriptAttachedError
from .interfaces import HostRuntime, ScriptHandle
from .logging import fail, ok, warn
from .models import FailurePolicy, ScriptDescriptor, SweepReport
from .resolver import DescriptorResolver

LOGGER = logging.getLogger(__name__)


class Interfaces:
    """Validate interface declarations against a host object model.

    One instance owns the class catalog and the memo tables; build it once per
    process and reuse it for every query.
    """

    def __init__(
        self,
        host: HostRuntime,
        config: InterfaceConfig | None = None,
        *,
        catalog: ClassCatalog | None = None,
        scanner: SourceScanner | None = None,
    ) -> None:
        """Create the engine.

        Args:
            host: Host object model supplying scripts and the class listing.
            config: Engine options; defaults apply when omitted.
            catalog: Prebuilt catalog; built from ``host`` when omitted.
            scanner: Scanner used by :meth:`validate_all`.
        """

        self.host = host
        self.config = config or InterfaceConfig()
        self.catalog = catalog if catalog is not None else ClassCatalog.from_host(host)
        self.resolver = DescriptorResolver(host, self.catalog, self.config)
        self.checker = ConformanceChecker(self.resolver)
        self.scanner = scanner or SourceScanner()

    def implements(
        self,
        implementation: object,
        interfaces: object,
        validate: bool | None = None,
        assert_on_fail: bool = True,
    ) -> bool:
        """Return whether ``implementation`` satisfies every requested interface.

        Args:
            implementation: Script handle or object with an attached script.
            interfaces: One interface or a sequence of them, each a script
                handle, descriptor or registered class name.
            validate: ``True`` runs the structural check, ``False`` only checks
                the implementor's declaration. ``None`` uses
                ``config.strict_validation``.
            assert_on_fail: Raise :class:`ConformanceError` on a mismatch
                instead of returning ``False``.

        Returns:
            bool: ``True`` when every interface is satisfied. An implementor
            declaring no interfaces never satisfies anything.

        Raises:
            ConformanceError: On a mismatch when ``assert_on_fail`` is set, and
                for configuration violations regardless of it.
            NoScriptAttachedError: If ``implementation`` has no script.
        """

        policy = FailurePolicy.from_flag(assert_on_fail)
        structural = self.config.strict_validation if validate is None else validate
        implementor = self.resolver.descriptor_of(implementation)
        declared = self.resolver.declared_interfaces(implementor)
        if not declared:
            return False

        declared_keys = {interface.key for interface in declared}
        for entry in _normalise_interfaces(interfaces):
            interface = self.resolver.resolve_interface(entry, implementor=implementor.identifier)
            if structural:
                if not self.checker.check(implementor, interface, policy):
                    return False
                continue
            if interface.key in declared_keys:
                continue
            failure = ConformanceFailure(
                FailureKind.NOT_DECLARED,
                implementor.identifier,
                self.resolver.display_name(interface),
            )
            if policy is FailurePolicy.FATAL:
                raise ConformanceError(failure)
            LOGGER.debug("Soft declaration failure: %s", failure.describe())
            return False
        return True

    def implementations(
        self,
        objects: Iterable[object],
        interfaces: object,
        validate: bool = False,
    ) -> list[object]:
        """Return the members of ``objects`` implementing ``interfaces``.

        Mismatches are soft so one failing object never aborts the batch;
        objects without an attached script are skipped.

        Args:
            objects: Candidates to filter.
            interfaces: One interface or a sequence of them.
            validate: Run structural checks instead of declaration checks.

        Returns:
            list[object]: Matching objects in their original order.
        """

        selected: list[object] = []
        for obj in objects:
            try:
                matched = self.implements(obj, interfaces, validate, assert_on_fail=False)
            except NoScriptAttachedError:
                LOGGER.debug("Skipping %r: no script attached", obj)
                continue
            if matched:
                selected.append(obj)
        return selected

    def validate_all(self) -> SweepReport:
        """Validate every declaring script under ``config.project_root``.

        Each source file is loaded once; scripts with a non-empty declared
        interface list are checked with ``config.strict_validation`` and fatal
        failures. Files the host cannot load are reported as diagnostics.

        Returns:
            SweepReport: Files visited and scripts validated.

        Raises:
            ConformanceError: On the first nonconforming declaration.
        """

        config = self.config
        scan = self.scanner.collect(config.project_root, config.ignored_dirs)
        report = SweepReport(root=config.project_root, diagnostics=list(scan.diagnostics))
        for path in scan.files:
            if not config.is_source(path):
                continue
            report.scanned.append(path)
            try:
                script = self.host.load_script_at(str(path))
            except (OSError, UnicodeDecodeError) as exc:
                message = f"Unable to load script {path}: {exc}"
                LOGGER.warning(message)
                report.diagnostics.append(message)
                continue
            declared = self.resolver.declared_interfaces(script)
            if not declared:
                continue
            self.implements(script, list(declared), config.strict_validation, assert_on_fail=True)
            report.validated.append(self.resolver.identifier_of(script))
        LOGGER.info(
            "Validated %d of %d source file(s) under %s",
            len(report.validated),
            len(report.scanned),
            config.project_root,
        )
        return report

    def startup(self) -> SweepReport | None:
        """Run :meth:`validate_all` when the host reports an authoring context.

        Returns:
            SweepReport | None: The sweep report, or ``None`` in deployed runs.
        """

        if not self.host.is_editor():
            LOGGER.debug("Host is not an authoring context; skipping interface sweep")
            return None
        return self.validate_all()


def _normalise_interfaces(interfaces: object) -> list[object]:
    if isinstance(interfaces, (str, ScriptDescriptor, ScriptHandle)):
        return [interfaces]
    if isinstance(interfaces, Sequence):
        return list(interfaces)
    return [interfaces]


def run_startup_validation(
    interfaces: Interfaces,
    *,
    use_emoji: bool = True,
    use_color: bool | None = None,
) -> SweepReport | None:
    """Run the startup sweep, terminating the process on a violation.

    Args:
        interfaces: Engine to validate with.
        use_emoji: Prefix console messages with emoji.
        use_color: Explicit colour preference; ``None`` detects a TTY.

    Returns:
        SweepReport | None: The sweep report, or ``None`` in deployed runs.

    Raises:
        SystemExit: With status ``1`` when a declaration does not conform.
    """

    try:
        report = interfaces.startup()
    except ConformanceError as exc:
        fail(str(exc), use_emoji=use_emoji, use_color=use_color)
        raise SystemExit(1) from exc
    if report is None:
        return None
    for diagnostic in report.diagnostics:
        warn(diagnostic, use_emoji=use_emoji, use_color=use_color)
    ok(
        f"{len(report.validated)} script(s) conform to their declared interfaces "
        f"({len(report.scanned)} source file(s) scanned)",
        use_emoji=use_emoji,
        use_color=use_color,
    )
    return report


__all__ = ["Interfaces", "run_startup_validation"]
