# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Concrete host object models."""

from __future__ import annotations

from .memory import MemoryHost, MemoryObject, MemoryScript
from .source_tree import RESOURCE_SCHEME, SourceScript, SourceTreeHost, UnresolvedConstant

__all__ = [
    "RESOURCE_SCHEME",
    "MemoryHost",
    "MemoryObject",
    "MemoryScript",
    "SourceScript",
    "SourceTreeHost",
    "UnresolvedConstant",
]
