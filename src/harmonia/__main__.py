"""
Entry point for running Harmonia as a module.

Usage:
    python -m harmonia
"""

import sys

from harmonia.main import main

if __name__ == "__main__":
    sys.exit(main())
