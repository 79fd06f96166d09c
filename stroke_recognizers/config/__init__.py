"""
Configuration for the stroke recognizers.
"""

from .settings import RecognizerConfig

__all__ = ['RecognizerConfig']
