"""Utilities for Runsible."""

from runsible.utils.console import ColorfulFormatter

__all__ = ["ColorfulFormatter"]
