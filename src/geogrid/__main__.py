"""
Package entry point.

Allows running: python -m geogrid -w -109 -e -102 -n 41 -s 37
"""

import sys

from .pipeline import main

if __name__ == "__main__":
    sys.exit(main())
