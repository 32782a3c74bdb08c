"""
Core infrastructure: configuration, logging, exceptions, clock and database.
"""

from hotelops.core.config import settings, get_settings
from hotelops.core.clock import Clock, SystemClock, DeterministicClock
from hotelops.core.exceptions import StoreError, ConfigurationError

__all__ = [
    "settings",
    "get_settings",
    "Clock",
    "SystemClock",
    "DeterministicClock",
    "StoreError",
    "ConfigurationError",
]
