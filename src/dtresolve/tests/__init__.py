"""
Tests for the dtresolve package.
"""
