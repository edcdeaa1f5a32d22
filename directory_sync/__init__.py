"""Cache-first, cooldown-aware synchronisation of directory records."""

__version__ = "1.0.0"
