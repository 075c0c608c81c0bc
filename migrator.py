#!/usr/bin/env python3
"""
Park Migrator - command line launcher

Runs the parkmigrate CLI straight from a checkout, without installing.

Usage:
    python migrator.py inspect <park.sc6>
    python migrator.py import <park.sv6> --format json
"""

import sys
from pathlib import Path

# Add src to path
_src_dir = Path(__file__).parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from parkmigrator.cli import main


if __name__ == "__main__":
    main()
