"""Runsible: run a YAML runlist of shell commands over one SSH session."""

__version__ = "0.3.0"
