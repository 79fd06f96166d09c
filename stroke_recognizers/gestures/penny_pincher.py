"""
Penny Pincher Recognizer Implementation

Penny Pincher keeps only the directions between consecutive resampled
points. Two gestures are compared by summing the dot products of their
corresponding unit tangent vectors, so a larger sum means a closer match.

Reference: Taranta and LaViola, "Penny Pincher: a blazing fast, highly
accurate $-family recognizer", GI 2015.
"""

import math
from typing import Any, List, Optional, Sequence, Tuple

from .base import BaseRecognizer
from ..config.settings import RecognizerConfig
from ..utils.gesture_utils import Point, GeometryUtils, PathUtils


def tangent_vectors(points: Sequence[Point]) -> List[Tuple[float, float]]:
    """Unit vectors between consecutive points; zero-length vectors are kept as is."""
    vectors = []
    for i in range(1, len(points)):
        dx = points[i].x - points[i - 1].x
        dy = points[i].y - points[i - 1].y
        length = math.sqrt(dx * dx + dy * dy)
        if length > 0:
            vectors.append((dx / length, dy / length))
        else:
            vectors.append((dx, dy))
    return vectors


def dot_product_similarity(vectors1: Sequence[Tuple[float, float]],
                           vectors2: Sequence[Tuple[float, float]]) -> float:
    """Sum of the dot products of corresponding vectors."""
    return sum(v1[0] * v2[0] + v1[1] * v2[1] for v1, v2 in zip(vectors1, vectors2))


class PennyGesture:
    """Gesture stored as resampling_points - 1 unit tangent vectors."""

    def __init__(self, name: str, points: Sequence[Point], resampling_points: int):
        self.name = name
        self.vectors = tangent_vectors(GeometryUtils.resample(points, resampling_points))


class PennyPincherRecognizer(BaseRecognizer):
    """Penny Pincher recognizer; the best template has the highest score."""

    algorithm = 'Penny Pincher'
    higher_is_better = True

    def __init__(self, resampling_points: int = RecognizerConfig.DEFAULT_RESAMPLING_POINTS,
                 n_jobs: Optional[int] = None):
        super().__init__(resampling_points, n_jobs)

    def _make_template(self, name: str, path: Sequence[Any]) -> PennyGesture:
        points = PathUtils.to_points(path)
        PathUtils.require_points(points)
        return PennyGesture(name, points, self.resampling_points)

    def _score(self, candidate: PennyGesture, template: PennyGesture, bound: float) -> float:
        return dot_product_similarity(candidate.vectors, template.vectors)
