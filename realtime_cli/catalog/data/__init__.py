"""Bundled manifest resources."""
