"""Fusion+ cross-chain resolver transaction composition."""

__version__ = "0.1.0"
