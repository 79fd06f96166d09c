"""
$P (Point Cloud) Recognizer Implementation

$P forgets the order in which points were drawn: gestures become clouds
of resampled, scaled and centered points, and two clouds are compared by
greedily pairing each point with its nearest unmatched counterpart. Early
pairs weigh more, and several starting points are tried in both
directions.

Reference: https://depts.washington.edu/acelab/proj/dollar/pdollar.html
"""

import math
from typing import Any, Optional, Sequence

from .base import BaseRecognizer
from ..config.settings import RecognizerConfig
from ..utils.gesture_utils import Point, GeometryUtils, PathUtils


class PointCloud:
    """Point-cloud template: resampled, scaled to the unit square, centered."""

    def __init__(self, name: str, points: Sequence[Point], resampling_points: int):
        self.name = name
        self.points = GeometryUtils.resample(points, resampling_points, stroke_aware=True)
        self.points = GeometryUtils.scale_to_unit(self.points)
        self.points = GeometryUtils.translate_to(self.points)


def cloud_step(n: int) -> int:
    """Stride between the starting points tried by the cloud matchers."""
    return max(1, int(math.pow(n, RecognizerConfig.CLOUD_STEP_EXPONENT)))


def cloud_distance(pts1: Sequence[Point], pts2: Sequence[Point], start: int) -> float:
    """
    Weighted greedy matching distance from pts1 to pts2.

    Points of pts1 are visited from index start onwards (wrapping around),
    each paired with its nearest unmatched point of pts2. The k-th pairing
    is weighted by 1 - k/n.
    """
    n = len(pts1)
    matched = [False] * n  # len(pts1) == len(pts2)
    total = 0.0
    i = start
    while True:
        index = -1
        best = math.inf
        for j in range(n):
            if not matched[j]:
                d = GeometryUtils.calculate_distance(pts1[i], pts2[j])
                if d < best:
                    best = d
                    index = j
        matched[index] = True
        weight = 1 - ((i - start + n) % n) / n
        total += weight * best
        i = (i + 1) % n
        if i == start:
            break
    return total


def greedy_cloud_match(points: Sequence[Point], template_points: Sequence[Point]) -> float:
    """Minimum cloud distance over sampled starting points and both directions."""
    n = len(points)
    step = cloud_step(n)
    best = math.inf
    for i in range(0, n, step):
        d1 = cloud_distance(points, template_points, i)
        d2 = cloud_distance(template_points, points, i)
        best = min(best, d1, d2)
    return best


class PointCloudRecognizer(BaseRecognizer):
    """
    $P (Point Cloud) Recognizer implementation.

    Articulation invariant: stroke order, stroke direction and the number
    of strokes do not matter.
    """

    algorithm = '$P'

    def __init__(self, resampling_points: int = RecognizerConfig.DEFAULT_RESAMPLING_POINTS,
                 n_jobs: Optional[int] = None):
        super().__init__(resampling_points, n_jobs)

    def _make_template(self, name: str, path: Sequence[Any]) -> PointCloud:
        points = PathUtils.to_points(path, default_stroke_id=1)
        PathUtils.require_points(points)
        return PointCloud(name, points, self.resampling_points)

    def _score(self, candidate: PointCloud, template: PointCloud, bound: float) -> float:
        return greedy_cloud_match(candidate.points, template.points)

