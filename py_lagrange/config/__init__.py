"""
Configuration for texture synthesis.
"""

from .config import Settings, settings

__all__ = ['Settings', 'settings']
