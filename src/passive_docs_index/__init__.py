"""Passive Docs Index: local framework docs plus a compressed CLAUDE.md index."""

__version__ = "0.1.0"
