"""Workflow transfer between automation platform instances."""

__version__ = "0.1.0"

__all__ = ["__version__"]
