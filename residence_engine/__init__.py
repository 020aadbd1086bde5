"""Residence allocation and booking workflow engine."""

__version__ = "0.1.0"
