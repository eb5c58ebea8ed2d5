"""Decoders for AtoN light characteristic, fog signal and design code notation."""

__version__ = "0.1.0"
