"""
Probes that read state from a running node.
"""

from pallet_probe.core.probes.storage_probe import main as storage_main
from pallet_probe.core.probes.storage_probe import run_probe

__all__ = [
    "storage_main",
    "run_probe",
]
