"""Workers' compensation premium rating service."""

__version__ = "1.0.0"
