"""Utility helpers for depcache."""

from .files import mtime

__all__ = ["mtime"]
