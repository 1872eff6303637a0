"""Backend dispatch with retry."""

from .dispatcher import Dispatcher

__all__ = ["Dispatcher"]
