"""
Field mappers for Datawise
"""

from .auto_mapper import AutoMapper, auto_map
from .interactive_mapper import InteractiveMapper

__all__ = ['AutoMapper', 'auto_map', 'InteractiveMapper']
