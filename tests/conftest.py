# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from ifacecheck.hosts import MemoryHost, MemoryScript


@pytest.fixture
def damagable() -> MemoryScript:
    """Return an interface declaring the ``damage`` signal."""
    return MemoryScript(path="res://interfaces/IDamagable.gd", class_name="IDamagable", signals=("damage",))


@pytest.fixture
def attacker(damagable: MemoryScript) -> MemoryScript:
    """Return a script declaring and implementing ``IDamagable``."""
    return MemoryScript(
        path="res://actors/attacker.gd",
        class_name="Attacker",
        signals=("damage",),
        methods=("deal_damage",),
        constants={"implements": ["IDamagable"]},
    )


@pytest.fixture
def host(damagable: MemoryScript, attacker: MemoryScript) -> MemoryHost:
    """Return an editor host holding ``damagable`` and ``attacker``."""
    return MemoryHost([damagable, attacker])


@pytest.fixture
def write_sources(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Return a helper writing ``{relative path: source}`` under ``tmp_path``."""

    def _write(files: dict[str, str]) -> Path:
        for relative, source in files.items():
            target = tmp_path / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(source, encoding="utf-8")
        return tmp_path

    return _write
