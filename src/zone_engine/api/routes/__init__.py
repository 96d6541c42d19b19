"""Route group exports."""

from . import health, zones

__all__ = ["zones", "health"]
