# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Memoization helpers."""

from .memo import CacheInfo, InsertOnlyCache, memoize

__all__ = ["CacheInfo", "InsertOnlyCache", "memoize"]
