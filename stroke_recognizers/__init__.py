"""
Stroke Recognizers Package
Template matchers and a statistical classifier for 2D stroke gestures.
"""

from .gestures import NO_MATCH, RecognitionResult, create_recognizer, RECOGNIZERS
from .utils import Point, configure_logging

__version__ = "1.0.0"
__all__ = ["NO_MATCH", "RecognitionResult", "create_recognizer", "RECOGNIZERS", "Point", "configure_logging"]
