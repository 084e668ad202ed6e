"""
Pallet Storage Probe

Reads timestamp and transaction-payment storage from a Substrate node with
custom type definitions loaded.
"""

__version__ = "1.0.0"

from pallet_probe.core import (
    ProbeConfig,
    ProbeError,
    load_config,
    load_type_definitions,
)

__all__ = [
    "__version__",
    "ProbeConfig",
    "ProbeError",
    "load_config",
    "load_type_definitions",
]
