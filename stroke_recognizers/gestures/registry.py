"""
Names of the available recognition algorithms and a factory for them.
"""

from typing import Callable, Dict, NamedTuple

from .base import BaseRecognizer
from .dollar_recognizer import DollarRecognizer
from .ftl_recognizer import FTLRecognizer
from .ndollar_recognizer import NDollarRecognizer
from .penny_pincher import PennyPincherRecognizer
from .point_cloud_recognizer import PointCloudRecognizer
from .qdollar_recognizer import QDollarRecognizer
from .rubine_classifier import RubineClassifier
from ..config.settings import RecognizerConfig


class RecognizerSpec(NamedTuple):
    """Constructor of an algorithm and the templates it needs per class."""
    factory: Callable[[int], BaseRecognizer]
    min_templates_per_class: int


RECOGNIZERS: Dict[str, RecognizerSpec] = {
    'Rubine': RecognizerSpec(lambda n: RubineClassifier(n), RecognizerConfig.RUBINE_MIN_EXAMPLES),
    '$1': RecognizerSpec(lambda n: DollarRecognizer(n), 1),
    'Protractor': RecognizerSpec(lambda n: DollarRecognizer(n, use_protractor=True), 1),
    '$N': RecognizerSpec(lambda n: NDollarRecognizer(n), 1),
    '$N-Protractor': RecognizerSpec(lambda n: NDollarRecognizer(n, use_protractor=True), 1),
    '$P': RecognizerSpec(lambda n: PointCloudRecognizer(n), 1),
    'Penny Pincher': RecognizerSpec(lambda n: PennyPincherRecognizer(n), 1),
    '$Q': RecognizerSpec(lambda n: QDollarRecognizer(n), 1),
    '!FTL': RecognizerSpec(lambda n: FTLRecognizer(n), 1),
    '!NFTL': RecognizerSpec(lambda n: FTLRecognizer(n, normalized=True), 1),
}


def create_recognizer(name: str,
                      resampling_points: int = RecognizerConfig.DEFAULT_RESAMPLING_POINTS) -> BaseRecognizer:
    """
    Create a recognizer by algorithm name.

    Raises:
        ValueError: If name is not one of RECOGNIZERS
    """
    try:
        spec = RECOGNIZERS[name]
    except KeyError:
        raise ValueError(f"Unknown recognizer '{name}', expected one of {', '.join(RECOGNIZERS)}") from None
    return spec.factory(resampling_points)
