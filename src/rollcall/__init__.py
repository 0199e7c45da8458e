"""Rollcall - university attendance sessions."""

__version__ = "0.1.0"
