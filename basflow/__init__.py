"""Byte strings, handler pools, service groups and session work state machines."""

__version__ = "0.1.0"