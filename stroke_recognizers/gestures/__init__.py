"""
Stroke gesture recognition algorithms.

This module provides the template matchers of the $-family ($1,
Protractor, $N, $P, $Q), the !FTL shape-distance matcher, Penny Pincher
and the Rubine statistical classifier, all behind one add/train/recognize
lifecycle.
"""

from .base import NO_MATCH, BaseRecognizer, RecognitionResult
from .dollar_recognizer import DollarRecognizer
from .ndollar_recognizer import NDollarRecognizer
from .point_cloud_recognizer import PointCloudRecognizer
from .qdollar_recognizer import QDollarRecognizer
from .ftl_recognizer import FTLRecognizer
from .penny_pincher import PennyPincherRecognizer
from .rubine_classifier import RubineClassifier
from .registry import RECOGNIZERS, create_recognizer

__all__ = [
    'NO_MATCH',
    'BaseRecognizer',
    'RecognitionResult',
    'DollarRecognizer',
    'NDollarRecognizer',
    'PointCloudRecognizer',
    'QDollarRecognizer',
    'FTLRecognizer',
    'PennyPincherRecognizer',
    'RubineClassifier',
    'RECOGNIZERS',
    'create_recognizer'
]
