"""CLI layer - argument parsing, output rendering, and error boundary.

This package is the outermost layer of the application.  It may import
from ``api``, ``core`` and ``infra``, but no other layer may import
from ``cli``.
"""
