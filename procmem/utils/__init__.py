"""Utility modules for procmem CLI."""

from . import formatter

__all__ = ['formatter']
