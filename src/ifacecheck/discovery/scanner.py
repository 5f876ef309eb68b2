# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem scanning for candidate source files."""

from __future__ import annotations

import logging
import os
from collections import deque
from collections.abc import Collection
from dataclasses import dataclass, field
from pathlib import Path

from ..config import InterfaceConfig

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ScanResult:
    """Files collected by a scan together with any diagnostics recorded.

    Attributes:
        root: Directory the scan started from.
        files: Every file reached, in breadth-first directory order.
        diagnostics: Messages describing directories that could not be read.
    """

    root: Path
    files: list[Path] = field(default_factory=list)
    diagnostics: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Return whether the scan completed without diagnostics."""

        return not self.diagnostics


class SourceScanner:
    """Walk a project tree breadth-first collecting files."""

    def __init__(self, *, follow_symlinks: bool = False) -> None:
        """Create a scanner.

        Args:
            follow_symlinks: When ``True`` descend into directories reached
                through symlinks. Each real directory is still entered once.
        """

        self.follow_symlinks = follow_symlinks

    def scan(self, root: Path, ignored_dir_names: Collection[str]) -> list[Path]:
        """Return every file reachable from ``root``.

        Args:
            root: Directory to start from.
            ignored_dir_names: Base names of directories that are not entered.

        Returns:
            list[Path]: File paths; empty when ``root`` cannot be opened.
        """

        return self.collect(root, ignored_dir_names).files

    def scan_sources(self, config: InterfaceConfig) -> list[Path]:
        """Return the source files under ``config.project_root``.

        Args:
            config: Configuration supplying the root, ignored directories and
                source suffixes.

        Returns:
            list[Path]: Files whose suffix marks them as source.
        """

        result = self.collect(config.project_root, config.ignored_dirs)
        return [path for path in result.files if config.is_source(path)]

    def collect(self, root: Path, ignored_dir_names: Collection[str]) -> ScanResult:
        """Scan ``root`` returning files and diagnostics.

        Args:
            root: Directory to start from.
            ignored_dir_names: Base names of directories that are not entered.

        Returns:
            ScanResult: Collected files and the diagnostics for unreadable
            directories.
        """

        result = ScanResult(root=root)
        ignored = frozenset(ignored_dir_names)
        pending: deque[Path] = deque([root])
        visited: set[Path] = set()
        while pending:
            directory = pending.popleft()
            if self.follow_symlinks:
                real = directory.resolve()
                if real in visited:
                    LOGGER.debug("Skipping %s: already scanned as %s", directory, real)
                    continue
                visited.add(real)
            try:
                entries = sorted(self._entries(directory), key=lambda entry: entry.name)
            except OSError as exc:
                message = f"Unable to open directory {directory}: {exc.strerror or exc}"
                LOGGER.warning(message)
                result.diagnostics.append(message)
                continue
            for entry in entries:
                if entry.name in (".", ".."):
                    continue
                if self._is_directory(entry):
                    if entry.name not in ignored and (self.follow_symlinks or not entry.is_symlink()):
                        pending.append(Path(entry.path))
                    continue
                result.files.append(Path(entry.path))
        LOGGER.debug("Scanned %s: %d files", root, len(result.files))
        return result

    def _entries(self, directory: Path) -> list[os.DirEntry[str]]:
        with os.scandir(directory) as iterator:
            return list(iterator)

    def _is_directory(self, entry: os.DirEntry[str]) -> bool:
        try:
            return entry.is_dir()
        except OSError:
            return False


__all__ = ["ScanResult", "SourceScanner"]
