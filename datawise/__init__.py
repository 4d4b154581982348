"""Datawise - spreadsheet export mapping and validation"""

from core._version import __version__

__all__ = ['__version__']
