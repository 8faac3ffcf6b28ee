"""Bundled dictionary artifacts."""
