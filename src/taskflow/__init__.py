"""TaskFlow: a minimal Redis-backed task pipeline."""

__version__ = "0.1.0"
