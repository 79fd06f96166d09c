"""
Utilities package for stroke gesture recognition.

This package provides the point type, path conversions, resampling and
normalization shared by every recognizer, plus logging helpers.
"""

from .gesture_utils import (
    ORIGIN,
    Point,
    GeometryUtils,
    PathUtils
)
from .logger import RecognitionLogger, configure_logging

__all__ = [
    'ORIGIN',
    'Point',
    'GeometryUtils',
    'PathUtils',
    'RecognitionLogger',
    'configure_logging'
]
