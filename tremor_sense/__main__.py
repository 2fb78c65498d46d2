"""
Main entry point for TremorSense package

This allows running the package with: python -m tremor_sense
"""

import sys

from .cli.main import main

if __name__ == "__main__":
    sys.exit(main())
