"""
$1 Unistroke Recognizer Implementation

This implements the $1 Unistroke Recognizer algorithm and its Protractor
variant. Candidates and templates are resampled, rotated to their
indicative angle, scaled to a reference square and centered; matching
either searches the best rotation with a Golden Section Search or
computes the optimal angle in closed form (Protractor).

Reference: https://depts.washington.edu/acelab/proj/dollar/index.html
"""

import math
from typing import Any, List, Optional, Sequence

from .base import BaseRecognizer
from ..config.settings import RecognizerConfig
from ..utils.gesture_utils import Point, GeometryUtils, PathUtils


class Unistroke:
    """Represents a gesture template with name and normalized points."""

    def __init__(self, name: str, points: Sequence[Point], resampling_points: int,
                 use_protractor: bool = False):
        self.name = name
        self.points = GeometryUtils.resample(points, resampling_points)
        radians = GeometryUtils.indicative_angle(self.points)
        self.points = GeometryUtils.rotate_points(self.points, -radians)
        self.points = GeometryUtils.scale_to_square(self.points, RecognizerConfig.SQUARE_SIZE)
        self.points = GeometryUtils.translate_to(self.points)
        self.vector: Optional[List[float]] = vectorize(self.points) if use_protractor else None


def vectorize(points: Sequence[Point], base_rotation: float = 0.0) -> List[float]:
    """
    Convert centered points to a unit vector for Protractor.

    The points are rotated by base_rotation first. A zero-length vector is
    returned unnormalized.
    """
    cos = math.cos(base_rotation)
    sin = math.sin(base_rotation)
    vector = []
    total = 0.0
    for point in points:
        x = point.x * cos - point.y * sin
        y = point.y * cos + point.x * sin
        vector.append(x)
        vector.append(y)
        total += x * x + y * y

    magnitude = math.sqrt(total)
    if magnitude > 0:
        vector = [v / magnitude for v in vector]
    return vector


def optimal_cosine_distance(vector1: Sequence[float], vector2: Sequence[float]) -> float:
    """Angular distance between two Protractor vectors at their optimal rotation."""
    if len(vector1) != len(vector2):
        return math.inf

    a = 0.0
    b = 0.0
    for i in range(0, len(vector1), 2):
        a += vector1[i] * vector2[i] + vector1[i + 1] * vector2[i + 1]
        b += vector1[i] * vector2[i + 1] - vector1[i + 1] * vector2[i]

    if a == 0.0:
        angle = math.pi / 2 if b > 0 else -math.pi / 2
    else:
        angle = math.atan(b / a)

    opt_dot = a * math.cos(angle) + b * math.sin(angle)
    opt_dot = max(-1.0, min(1.0, opt_dot))
    return math.acos(opt_dot)


def path_distance(points1: Sequence[Point], points2: Sequence[Point]) -> float:
    """Average distance between corresponding points of two paths."""
    if len(points1) != len(points2):
        return math.inf

    distance = 0.0
    for p1, p2 in zip(points1, points2):
        distance += GeometryUtils.calculate_distance(p1, p2)
    return distance / len(points1)


def distance_at_angle(points: Sequence[Point], template_points: Sequence[Point], angle: float) -> float:
    """Calculate distance after rotating points by angle."""
    rotated_points = GeometryUtils.rotate_points(points, angle)
    return path_distance(rotated_points, template_points)


def distance_at_best_angle(points: Sequence[Point], template_points: Sequence[Point],
                           theta_a: float = -RecognizerConfig.ANGLE_RANGE,
                           theta_b: float = RecognizerConfig.ANGLE_RANGE,
                           threshold: float = RecognizerConfig.ANGLE_PRECISION) -> float:
    """Find the best angle match using Golden Section Search."""
    phi = RecognizerConfig.PHI

    x1 = phi * theta_a + (1 - phi) * theta_b
    f1 = distance_at_angle(points, template_points, x1)

    x2 = (1 - phi) * theta_a + phi * theta_b
    f2 = distance_at_angle(points, template_points, x2)

    while abs(theta_b - theta_a) > threshold:
        if f1 < f2:
            theta_b = x2
            x2 = x1
            f2 = f1
            x1 = phi * theta_a + (1 - phi) * theta_b
            f1 = distance_at_angle(points, template_points, x1)
        else:
            theta_a = x1
            x1 = x2
            f1 = f2
            x2 = (1 - phi) * theta_a + phi * theta_b
            f2 = distance_at_angle(points, template_points, x2)

    return min(f1, f2)


class DollarRecognizer(BaseRecognizer):
    """$1 Unistroke Recognizer, or Protractor when use_protractor is set."""

    algorithm = '$1'

    def __init__(self, resampling_points: int = RecognizerConfig.DEFAULT_RESAMPLING_POINTS,
                 use_protractor: bool = False, n_jobs: Optional[int] = None):
        self.use_protractor = use_protractor
        if use_protractor:
            self.algorithm = 'Protractor'
        super().__init__(resampling_points, n_jobs)

    def _make_template(self, name: str, path: Sequence[Any]) -> Unistroke:
        # multistroke input is joined into one unistroke
        points = PathUtils.to_points(path)
        PathUtils.require_points(points)
        return Unistroke(name, points, self.resampling_points, self.use_protractor)

    def _score(self, candidate: Unistroke, template: Unistroke, bound: float) -> float:
        if self.use_protractor:
            return optimal_cosine_distance(template.vector, candidate.vector)
        return distance_at_best_angle(candidate.points, template.points)

    def similarity(self, distance: float) -> float:
        """Convert a recognition distance to a similarity score (1.0 is identical)."""
        if self.use_protractor:
            return 1.0 - distance / (math.pi / 2)
        return 1.0 - distance / RecognizerConfig.HALF_DIAGONAL
