"""
Famly household management package.

The package exposes accessors for the family-scoped data (tasks, calendar, shopping lists and
expenses), the derived views computed over them, and an HTTP surface and CLI built on top.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
