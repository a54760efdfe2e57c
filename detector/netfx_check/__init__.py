"""Detect installed .NET Framework versions from the Windows registry."""

__version__ = "1.0.0"
