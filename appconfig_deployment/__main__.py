"""
CLI Main Module

Entry point for running the deployment CLI as a module.
"""

import sys

from .cli.main import main

if __name__ == "__main__":
    sys.exit(main())
