"""
!FTL Shape-Distance Recognizer Implementation

!FTL resamples paths to the same number of points and compares, at every
interior point, the pair of segments meeting there with the corresponding
pair of the reference. The local shape distance (LSD) measures how far the
two segment pairs are from being similar triangles; the normalized variant
(NLSD) only looks at their angles and is reported divided by NLSD_SCALE.

The accumulated distance is both the score and the pruning bound: a
reference is abandoned as soon as its partial sum exceeds the best
distance so far (or the caller's threshold).

Reference: https://doi.org/10.1145/3242969.3243032
"""

import math
from typing import Any, List, Optional, Sequence, Tuple

from .base import BaseRecognizer
from ..config.settings import RecognizerConfig
from ..utils.gesture_utils import Point, GeometryUtils, PathUtils

Vector = Tuple[float, float]


def _dot(a: Vector, b: Vector) -> float:
    return a[0] * b[0] + a[1] * b[1]


def local_shape_distance(a: Vector, b: Vector, u: Vector, v: Vector) -> float:
    """
    Local shape distance between segment pairs (a, b) and (u, v).

    Zero when the outgoing segments have zero length.
    """
    alpha = _dot(a, a)
    beta = _dot(b, b)
    gamma = _dot(u, u)
    delta = _dot(v, v)
    if beta * delta == 0:
        return 0.0
    numerator = alpha * delta + beta * gamma - 2 * (
        _dot(a, b) * _dot(u, v) - _dot(a, v) * _dot(b, u) + _dot(a, u) * _dot(b, v))
    return math.sqrt(max(0.0, numerator / (beta * delta)))


def normalized_local_shape_distance(a: Vector, b: Vector, u: Vector, v: Vector) -> float:
    """
    Orientation-insensitive local shape distance, in [0, sqrt(2)].

    Zero when any of the four segments has zero length.
    """
    alpha = _dot(a, a)
    beta = _dot(b, b)
    gamma = _dot(u, u)
    delta = _dot(v, v)
    if alpha * beta * gamma * delta == 0:
        return 0.0
    cosine = ((_dot(a, b) * _dot(u, v) + _dot(a, u) * _dot(b, v) - _dot(a, v) * _dot(b, u))
              / (math.sqrt(alpha) * math.sqrt(beta) * math.sqrt(gamma) * math.sqrt(delta)))
    return math.sqrt(max(0.0, 1 - cosine))


def segments(points: Sequence[Point]) -> List[Vector]:
    """Displacement vectors between consecutive points."""
    return [(points[i].x - points[i - 1].x, points[i].y - points[i - 1].y)
            for i in range(1, len(points))]


class FTLGesture:
    """Reference or candidate gesture: resampled points and their segments."""

    def __init__(self, name: str, points: Sequence[Point], resampling_points: int):
        self.name = name
        self.points = GeometryUtils.resample(points, resampling_points, stroke_aware=True)
        self.segments = segments(self.points)
        # the same path walked from its end
        self.reversed_segments = segments(self.points[::-1])


class FTLRecognizer(BaseRecognizer):
    """
    !FTL recognizer, or !NFTL when normalized is set.

    Without sensitive_orientation every reference is also traversed in
    reverse and the smaller of the two distances is kept. Templates whose
    distance exceeds threshold are never selected.
    """

    algorithm = '!FTL'

    def __init__(self, resampling_points: int = RecognizerConfig.DEFAULT_RESAMPLING_POINTS,
                 normalized: bool = False, sensitive_orientation: bool = False,
                 threshold: float = math.inf, n_jobs: Optional[int] = None):
        self.normalized = normalized
        self.sensitive_orientation = sensitive_orientation
        self.threshold = threshold
        if normalized:
            self.algorithm = '!NFTL'
        super().__init__(resampling_points, n_jobs)

    def _make_template(self, name: str, path: Sequence[Any]) -> FTLGesture:
        points = PathUtils.to_points(path, default_stroke_id=1)
        PathUtils.require_points(points)
        return FTLGesture(name, points, self.resampling_points)

    def _accumulate(self, candidate: Sequence[Vector], reference: Sequence[Vector], bound: float) -> float:
        """Sum local distances over interior points, stopping once above bound."""
        shape_distance = normalized_local_shape_distance if self.normalized else local_shape_distance
        total = 0.0
        for i in range(1, len(candidate)):
            total += shape_distance(candidate[i - 1], candidate[i], reference[i - 1], reference[i])
            if total > bound:
                break
        return total

    def _score(self, candidate: FTLGesture, template: FTLGesture, bound: float) -> float:
        d_plus = self._accumulate(candidate.segments, template.segments, bound)
        if self.sensitive_orientation:
            return d_plus
        d_less = self._accumulate(candidate.segments, template.reversed_segments, bound)
        return min(d_plus, d_less)

    def _accepts(self, score: float) -> bool:
        return score <= self.threshold

    def _pruning_bound(self, best: float) -> float:
        return min(best, self.threshold)

    def _final_score(self, score: float) -> float:
        if self.normalized:
            return score / RecognizerConfig.NLSD_SCALE
        return score
