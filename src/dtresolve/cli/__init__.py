"""Command line interface for dtresolve."""

from .interactive import interactive_main, main

__all__ = ["interactive_main", "main"]
