# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Runtime structural-conformance checks for script interfaces."""

from __future__ import annotations

from importlib import metadata

from .catalog import ClassCatalog, ClassCatalogEntry
from .checker import ConformanceChecker
from .config import InterfaceConfig, load_config
from .errors import (
    ConfigError,
    ConformanceError,
    ConformanceFailure,
    FailureKind,
    InterfaceError,
    NoScriptAttachedError,
)
from .models import FailurePolicy, ScriptDescriptor, SweepReport
from .orchestrator import Interfaces, run_startup_validation
from .resolver import DescriptorResolver

__all__ = [
    "ClassCatalog",
    "ClassCatalogEntry",
    "ConfigError",
    "ConformanceChecker",
    "ConformanceError",
    "ConformanceFailure",
    "DescriptorResolver",
    "FailureKind",
    "FailurePolicy",
    "InterfaceConfig",
    "InterfaceError",
    "Interfaces",
    "NoScriptAttachedError",
    "ScriptDescriptor",
    "SweepReport",
    "__version__",
    "load_config",
    "run_startup_validation",
]

try:
    __version__ = metadata.version("ifacecheck")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
