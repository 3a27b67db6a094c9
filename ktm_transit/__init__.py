"""Kathmandu Valley bus journey planning and fare backend."""

__version__ = "1.0.0"
