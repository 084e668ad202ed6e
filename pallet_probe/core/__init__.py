"""
Core functionality: configuration, type definitions and errors.
"""

from pallet_probe.core.config import ProbeConfig, load_config
from pallet_probe.core.errors import ProbeError
from pallet_probe.core.types import load_type_definitions

__all__ = [
    "ProbeConfig",
    "ProbeError",
    "load_config",
    "load_type_definitions",
]
