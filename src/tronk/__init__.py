"""TRONK: a keyboard-driven card collection manager."""

__version__ = "0.1.0"
