"""
HELA command-line interface (click).
"""

from .main import cli

__all__ = ["cli"]
