#!/usr/bin/env python3
"""
JMX Health Check CLI.

Runs the probe from a source checkout without installing the package.

Usage:
    python cli.py -h
    python cli.py -U http://localhost:8778/jolokia -O com.example:type=Health -o health
    python cli.py -U http://localhost:8778/jolokia -O "com.example:type=Health,*" -o health -v
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from jmxcheck.cli.main import main

if __name__ == "__main__":
    main()
