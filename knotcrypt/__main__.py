"""
Main entry point for running knotcrypt as a module.

Usage:
    python -m knotcrypt <command> [options]
"""

from .cli import main
import sys

if __name__ == "__main__":
    sys.exit(main())
