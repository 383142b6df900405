"""
Centralized configuration management.

This module provides a clean interface to the configuration system.
"""

from .loader import get_settings as get_settings
from .models import (
    AppSettings as AppSettings,
)
from .models import (
    ConnectionSettings as ConnectionSettings,
)
from .models import (
    PathSettings as PathSettings,
)

__all__ = [
    "AppSettings",
    "ConnectionSettings",
    "PathSettings",
    "get_settings",
]
