"""filehost: a minimal file-hosting service."""

__version__ = "1.0.0"
