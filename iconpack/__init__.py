"""Icon package build system."""

__version__ = "0.1.0"
