"""Shared building blocks: logging, cancellation and the error taxonomy."""
