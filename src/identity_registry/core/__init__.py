# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Ambient infrastructure shared by the registry: config, logging, errors, time."""

from .clock import Clock, ManualClock, SystemClock
from .config import RegistrySettings, clear_config_cache, get_config
from .exceptions import (
    ConfigError,
    ConflictError,
    NotFoundError,
    ReentrancyError,
    RegistryError,
    TimingError,
    UnauthorizedError,
    ValidationError,
)

__all__ = [
    "Clock",
    "ConfigError",
    "ConflictError",
    "ManualClock",
    "NotFoundError",
    "ReentrancyError",
    "RegistryError",
    "RegistrySettings",
    "SystemClock",
    "TimingError",
    "UnauthorizedError",
    "ValidationError",
    "clear_config_cache",
    "get_config",
]
