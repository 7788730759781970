"""
MixedScout package initializer.
Defines package version and exposes CLI.
"""
__version__ = "0.1.0"

# Expose CLI entry point
from mixed_scout.cli import cli as main_cli

__all__ = ["__version__", "main_cli"]
