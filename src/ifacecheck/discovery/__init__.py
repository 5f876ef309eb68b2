# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Discovery helpers for the ifacecheck package."""

from __future__ import annotations

from .scanner import ScanResult, SourceScanner

__all__ = ["ScanResult", "SourceScanner"]
