"""
Entry point for running the package as a module.
This allows: python -m certigest
"""

import sys

from .cli import main

sys.exit(main())
