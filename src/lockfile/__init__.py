"""Upstream lock file model, loading and lookups."""
