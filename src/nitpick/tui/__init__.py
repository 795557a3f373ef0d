"""Terminal user interface for Nitpick."""

from .app import NitpickApp

__all__ = ["NitpickApp"]
