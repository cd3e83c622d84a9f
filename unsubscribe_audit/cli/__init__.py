"""
CLI module for the unsubscribe audit.

Provides the click-based command-line interface with subcommands.
"""

from .main import cli

__all__ = ['cli']
