#!/usr/bin/env python3
"""
Entry point script for reading pallet storage from a node.
"""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pallet_probe.core.probes.storage_probe import main

if __name__ == "__main__":
    sys.exit(main())
