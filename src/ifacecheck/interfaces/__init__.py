# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Protocol definitions for collaborators supplied by the host."""

from __future__ import annotations

from .host import GlobalClassEntry, HostRuntime, ScriptHandle

__all__ = ["GlobalClassEntry", "HostRuntime", "ScriptHandle"]
