"""Shared helpers."""
from .binary import IoBuffer

__all__ = ['IoBuffer']
