"""
Command-line interface for procmon.
"""

from .main import main_cli

__all__ = ["main_cli"]
