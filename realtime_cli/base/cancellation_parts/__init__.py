"""Implementation parts for ``realtime_cli.base.cancellation``."""
