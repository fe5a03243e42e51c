"""
Repository layer - owned, injectable storage for the engine.

In-memory only; the engine performs no I/O.
"""
from .pass_repository import PassRepository

__all__ = ['PassRepository']
