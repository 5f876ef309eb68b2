# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the registered-class catalog."""

from ifacecheck.catalog import ClassCatalog, ClassCatalogEntry
from ifacecheck.hosts import MemoryHost, MemoryScript


def test_catalog_resolves_registered_names(host: MemoryHost) -> None:
    catalog = ClassCatalog.from_host(host)

    assert catalog.resolve("IDamagable") == "res://interfaces/IDamagable.gd"
    assert catalog.resolve("Missing") is None
    assert "Attacker" in catalog
    assert len(catalog) == 2


def test_catalog_keeps_first_registration() -> None:
    catalog = ClassCatalog(
        [
            ClassCatalogEntry(class_name="IFoo", path="res://a.gd"),
            ClassCatalogEntry(class_name="IFoo", path="res://b.gd"),
        ],
    )

    assert catalog.resolve("IFoo") == "res://a.gd"
    assert catalog.names() == ("IFoo",)


def test_catalog_does_not_see_later_registrations(host: MemoryHost) -> None:
    catalog = ClassCatalog.from_host(host)
    host.add(MemoryScript(path="res://late.gd", class_name="ILate"))

    assert "ILate" not in catalog
