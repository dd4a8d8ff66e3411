"""Configuration module for Runsible.

- Settings: per-run settings from the policy document and CLI
- PolicyDocument: runlists addressable by name
- RuntimeOptions: process-level options from RUNSIBLE_* env vars
"""

from runsible.config.environment import RuntimeOptions
from runsible.config.policy import PolicyDocument, Runlist, load_policy
from runsible.config.settings import Settings

__all__ = ["PolicyDocument", "Runlist", "RuntimeOptions", "Settings", "load_policy"]
