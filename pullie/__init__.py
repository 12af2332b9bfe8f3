"""Pullie - GitHub pull request automation bot."""

__version__ = "1.0.0"
