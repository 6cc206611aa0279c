"""Command-line interface modules for symfeat.

This package contains the execution logic, making scripts/ optional.
"""

from symfeat.cli.run_extraction import run_extraction

__all__ = ['run_extraction']
