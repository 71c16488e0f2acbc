"""
Main entry point for running the package as a module.

Usage:
    python -m assetpub publish
    python -m assetpub mirror
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
