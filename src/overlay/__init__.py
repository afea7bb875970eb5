"""Overlay of an upstream lock file onto a resolution pool."""
