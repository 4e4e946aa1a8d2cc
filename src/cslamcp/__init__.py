"""CSLA .NET code example server."""

__version__ = "1.0.0"
