"""
$N Multistroke Recognizer Implementation

$N reduces a multistroke template to every unistroke it could have been
drawn as: each permutation of the stroke order combined with each choice
of stroke directions. A candidate is joined into one unistroke and
compared with the $1 machinery (Golden Section Search or Protractor),
after discarding unistrokes whose start direction differs too much.

Reference: https://depts.washington.edu/acelab/proj/dollar/ndollar.html
"""

import math
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from .base import BaseRecognizer
from .dollar_recognizer import distance_at_best_angle, optimal_cosine_distance, vectorize
from ..config.settings import RecognizerConfig
from ..utils.gesture_utils import Point, GeometryUtils, PathUtils


def heap_permutations(n: int) -> Iterator[Tuple[int, ...]]:
    """Yield every permutation of range(n) once (iterative Heap's algorithm)."""
    order = list(range(n))
    counters = [0] * n
    yield tuple(order)

    i = 1
    while i < n:
        if counters[i] < i:
            j = 0 if i % 2 == 0 else counters[i]
            order[j], order[i] = order[i], order[j]
            yield tuple(order)
            counters[i] += 1
            i = 1
        else:
            counters[i] = 0
            i += 1


def make_unistrokes(strokes: Sequence[Sequence[Point]]) -> List[List[Point]]:
    """
    Join strokes into one unistroke per (stroke order, stroke directions).

    Returns k! * 2**k point lists for k strokes; bit i of the direction mask
    reverses the i-th stroke of the order.
    """
    unistrokes = []
    for order in heap_permutations(len(strokes)):
        for directions in range(2 ** len(order)):
            unistroke = []
            for i, stroke_index in enumerate(order):
                stroke = strokes[stroke_index]
                if (directions >> i) & 1:
                    unistroke.extend(reversed(stroke))
                else:
                    unistroke.extend(stroke)
            unistrokes.append(unistroke)
    return unistrokes


def start_unit_vector(points: Sequence[Point], index: int) -> Point:
    """Unit vector from points[0] towards points[index]; a zero vector stays zero."""
    dx = points[index].x - points[0].x
    dy = points[index].y - points[0].y
    length = math.sqrt(dx * dx + dy * dy)
    if length == 0:
        return Point(dx, dy)
    return Point(dx / length, dy / length)


def angle_between_unit_vectors(v1: Point, v2: Point) -> float:
    """Angle between two unit vectors, in radians."""
    n = v1.x * v2.x + v1.y * v2.y
    return math.acos(max(-1.0, min(1.0, n)))


class NUnistroke:
    """One unistroke alternative of a multistroke, normalized for matching."""

    def __init__(self, name: str, points: Sequence[Point], resampling_points: int,
                 use_bounded_rotation_invariance: bool = False, use_protractor: bool = False,
                 num_strokes: int = 1):
        self.name = name
        self.num_strokes = num_strokes
        self.points = GeometryUtils.resample(points, resampling_points)
        radians = GeometryUtils.indicative_angle(self.points)
        self.points = GeometryUtils.rotate_points(self.points, -radians)
        self.points = GeometryUtils.scale_dim_to(self.points, RecognizerConfig.SQUARE_SIZE,
                                                 RecognizerConfig.ONE_D_THRESHOLD)
        if use_bounded_rotation_invariance:
            self.points = GeometryUtils.rotate_points(self.points, radians)  # restore
        self.points = GeometryUtils.translate_to(self.points)

        index = max(1, resampling_points // RecognizerConfig.START_VECTOR_DIVISOR)
        self.start_unit_vector = start_unit_vector(self.points, index)

        self.vector: Optional[List[float]] = None
        if use_protractor:
            base_rotation = 0.0
            if use_bounded_rotation_invariance:
                # snap to the nearest multiple of 45 degrees
                indicative = math.atan2(self.points[0].y, self.points[0].x)
                step = math.pi / 4.0
                base_orientation = step * math.floor((indicative + math.pi / 8.0) / step)
                base_rotation = base_orientation - indicative
            self.vector = vectorize(self.points, base_rotation)


class Multistroke:
    """A multistroke template: one NUnistroke per stroke order and direction."""

    def __init__(self, name: str, strokes: Sequence[Sequence[Point]], resampling_points: int,
                 use_bounded_rotation_invariance: bool = False, use_protractor: bool = False):
        self.name = name
        self.num_strokes = len(strokes)
        self.unistrokes = [
            NUnistroke(name, points, resampling_points, use_bounded_rotation_invariance,
                       use_protractor, self.num_strokes)
            for points in make_unistrokes(strokes)
        ]


class NDollarRecognizer(BaseRecognizer):
    """$N Multistroke Recognizer, or $N-Protractor when use_protractor is set."""

    algorithm = '$N'

    def __init__(self, resampling_points: int = RecognizerConfig.DEFAULT_RESAMPLING_POINTS,
                 use_bounded_rotation_invariance: bool = False, use_protractor: bool = False,
                 n_jobs: Optional[int] = None):
        self.use_bounded_rotation_invariance = use_bounded_rotation_invariance
        self.use_protractor = use_protractor
        if use_protractor:
            self.algorithm = '$N-Protractor'
        super().__init__(resampling_points, n_jobs)

    def _strokes(self, path: Sequence[Any]) -> List[List[Point]]:
        strokes = PathUtils.to_strokes(path)
        PathUtils.require_points(PathUtils.flatten(strokes))
        return strokes

    def _make_template(self, name: str, path: Sequence[Any]) -> Multistroke:
        return Multistroke(name, self._strokes(path), self.resampling_points,
                           self.use_bounded_rotation_invariance, self.use_protractor)

    def _make_candidate(self, path: Sequence[Any]) -> NUnistroke:
        strokes = self._strokes(path)
        return NUnistroke('', PathUtils.flatten(strokes), self.resampling_points,
                          self.use_bounded_rotation_invariance, self.use_protractor,
                          len(strokes))

    def _eligible_templates(self, candidate: NUnistroke, require_same_stroke_count: bool) -> Iterator[NUnistroke]:
        for multistroke in self.templates:
            if require_same_stroke_count and multistroke.num_strokes != candidate.num_strokes:
                continue
            for unistroke in multistroke.unistrokes:
                # strokes must start in about the same direction
                angle = angle_between_unit_vectors(candidate.start_unit_vector,
                                                   unistroke.start_unit_vector)
                if angle <= RecognizerConfig.START_ANGLE_THRESHOLD:
                    yield unistroke

    def _score(self, candidate: NUnistroke, template: NUnistroke, bound: float) -> float:
        if self.use_protractor:
            return optimal_cosine_distance(template.vector, candidate.vector)
        return distance_at_best_angle(candidate.points, template.points)

    @property
    def unistroke_count(self) -> int:
        return sum(len(m.unistrokes) for m in self.templates)
