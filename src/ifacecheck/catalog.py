# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Catalog of globally registered classes."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from types import MappingProxyType

from .interfaces import GlobalClassEntry, HostRuntime

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ClassCatalogEntry:
    """Registered class name and the path of the script defining it."""

    class_name: str
    path: str


class ClassCatalog:
    """Read-only mapping of class names to defining paths.

    The catalog is materialised once; classes registered with the host after
    construction stay invisible to it.
    """

    def __init__(self, entries: Iterable[GlobalClassEntry]) -> None:
        """Build the catalog from the host's registered-class listing.

        Args:
            entries: Registered classes; the first registration of a duplicated
                name wins.
        """

        table: dict[str, ClassCatalogEntry] = {}
        for entry in entries:
            if entry.class_name in table:
                LOGGER.warning(
                    "Class '%s' registered twice (%s, %s); keeping the first",
                    entry.class_name,
                    table[entry.class_name].path,
                    entry.path,
                )
                continue
            table[entry.class_name] = ClassCatalogEntry(class_name=entry.class_name, path=entry.path)
        self._entries = MappingProxyType(table)

    @classmethod
    def from_host(cls, host: HostRuntime) -> ClassCatalog:
        """Build the catalog from ``host.get_global_class_list()``."""

        return cls(host.get_global_class_list())

    def resolve(self, class_name: str) -> str | None:
        """Return the defining path of ``class_name`` or ``None`` when unknown.

        Args:
            class_name: Registered class name.

        Returns:
            str | None: Defining path of the class.
        """

        entry = self._entries.get(class_name)
        return entry.path if entry is not None else None

    def names(self) -> tuple[str, ...]:
        """Return the registered class names in registration order."""

        return tuple(self._entries)

    def __contains__(self, class_name: object) -> bool:
        return class_name in self._entries

    def __iter__(self) -> Iterator[ClassCatalogEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["ClassCatalog", "ClassCatalogEntry"]
