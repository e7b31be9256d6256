"""
Entry point for running pageflow as a module.

Usage:
    python -m pageflow render content.json --output report.pdf
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
