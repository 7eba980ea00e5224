#!/usr/bin/env python3
"""
subgps Entry Point Script

This script initializes the CLI handler and extracts the GPS track of one video.
"""

import sys
from subgps.cli import CLIHandler

if __name__ == "__main__":
    if sys.version_info < (3, 8):
        sys.stderr.write("subgps requires Python 3.8 or later.\n")
        sys.exit(1)

    cli = CLIHandler()
    cli.run()
