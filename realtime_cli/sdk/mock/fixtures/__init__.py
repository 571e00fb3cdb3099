"""JSON fixtures for the mock realtime and control clients."""
