"""
$Q Super-Quick Recognizer Implementation

This implements the $Q Super-Quick Recognizer algorithm for gesture recognition.
It's designed for low-resource devices and provides fast recognition with
articulation-invariant matching using point clouds and lookup tables.

Every cloud carries a LUT_SIZE x LUT_SIZE lookup table giving, for each
coarse grid cell, the index of the nearest cloud point. The table yields a
cheap lower bound of the matching cost for every starting point, so most
of the exact greedy matchings can be skipped, and the exact matching
itself stops as soon as it exceeds the best distance found so far.

Reference: https://dl.acm.org/citation.cfm?id=3229434.3229465
"""

import math
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from .base import BaseRecognizer
from .point_cloud_recognizer import cloud_step
from ..config.settings import RecognizerConfig
from ..utils.gesture_utils import Point, GeometryUtils, PathUtils

MAX_INT_COORD = RecognizerConfig.MAX_INT_COORD  # (int_x, int_y) range from [0, MAX_INT_COORD - 1]
LUT_SIZE = RecognizerConfig.LUT_SIZE
LUT_SCALE_FACTOR = RecognizerConfig.LUT_SCALE_FACTOR  # scales (int_x, int_y) to LUT cells


def _round(value: float) -> int:
    """Round half up."""
    return int(math.floor(value + 0.5))


def _int_coord(value: float) -> int:
    return _round((value + 1.0) / 2.0 * (MAX_INT_COORD - 1))


def _grid_to_cloud(cell: float) -> float:
    """Position of a LUT cell on the cloud's coordinate axis."""
    return cell * LUT_SCALE_FACTOR / (MAX_INT_COORD - 1) * 2.0 - 1.0


class QPointCloud:
    """Point cloud for $Q with integer coordinates and a lookup table."""

    def __init__(self, name: str, points: Sequence[Point], resampling_points: int):
        self.name = name
        self.points = GeometryUtils.resample(points, resampling_points, stroke_aware=True)
        self.points = GeometryUtils.scale_to_unit(self.points)
        self.points = GeometryUtils.translate_to(self.points)
        self.int_coords = self._make_int_coords(self.points)
        self.lut = self._compute_lut(self.int_coords)
        self.cells, self.cell_offsets = self._lookup_cells(self.points, self.int_coords)
        self.grid_error = self._grid_error(self.points, self.int_coords)

    @staticmethod
    def _make_int_coords(points: Sequence[Point]) -> List[Tuple[int, int]]:
        """Quantize coordinates into [0, MAX_INT_COORD) for LUT indexing."""
        return [(_int_coord(p.x), _int_coord(p.y)) for p in points]

    @staticmethod
    def _compute_lut(int_coords: Sequence[Tuple[int, int]]) -> np.ndarray:
        """Index of the nearest point, in grid units, for every LUT cell."""
        rows = np.array([_round(ix / LUT_SCALE_FACTOR) for ix, _ in int_coords])
        cols = np.array([_round(iy / LUT_SCALE_FACTOR) for _, iy in int_coords])
        grid = np.arange(LUT_SIZE)
        dx = grid[:, None, None] - rows[None, None, :]
        dy = grid[None, :, None] - cols[None, None, :]
        # argmin keeps the first of equally near points
        return np.argmin(dx * dx + dy * dy, axis=2)

    @staticmethod
    def _lookup_cells(points: Sequence[Point], int_coords: Sequence[Tuple[int, int]]):
        """LUT cell of every point, and the distance from each point to its cell."""
        cells = []
        offsets = []
        for point, (ix, iy) in zip(points, int_coords):
            x = min(LUT_SIZE - 1, max(0, _round(ix / LUT_SCALE_FACTOR)))
            y = min(LUT_SIZE - 1, max(0, _round(iy / LUT_SCALE_FACTOR)))
            cells.append((x, y))
            offsets.append(math.hypot(point.x - _grid_to_cloud(x), point.y - _grid_to_cloud(y)))
        return cells, offsets

    @staticmethod
    def _grid_error(points: Sequence[Point], int_coords: Sequence[Tuple[int, int]]) -> float:
        """Largest distance between a point and the grid position the LUT was built from."""
        error = 0.0
        for point, (ix, iy) in zip(points, int_coords):
            gx = _grid_to_cloud(_round(ix / LUT_SCALE_FACTOR))
            gy = _grid_to_cloud(_round(iy / LUT_SCALE_FACTOR))
            error = max(error, math.hypot(point.x - gx, point.y - gy))
        return error


def cloud_distance(pts1: Sequence[Point], pts2: Sequence[Point], start: int,
                   min_so_far: float = math.inf) -> float:
    """
    Weighted greedy matching cost from pts1 to pts2, starting at pts1[start].

    Squared distances are weighted from n down to 1. Once the partial sum
    reaches min_so_far the partial sum is returned (early abandoning).
    """
    n = len(pts1)
    unmatched = list(range(n))  # indices for pts2 that are not matched
    i = start  # start matching with point 'start' from pts1
    weight = n  # weights decrease from n to 1
    sum_dist = 0.0

    while True:
        best_idx = -1
        b = math.inf
        for idx, j in enumerate(unmatched):
            d = GeometryUtils.calculate_squared_distance(pts1[i], pts2[j])
            if d < b:
                b = d
                best_idx = idx

        unmatched.pop(best_idx)
        sum_dist += weight * b
        if sum_dist >= min_so_far:
            return sum_dist  # early abandoning

        weight -= 1
        i = (i + 1) % n
        if i == start:
            break

    return sum_dist


def compute_lower_bound(cloud1: QPointCloud, cloud2: QPointCloud, step: int) -> List[float]:
    """
    Lower bounds of cloud_distance(cloud1.points, cloud2.points, start).

    Entry j bounds the cost of starting at point j * step. Each point of
    cloud1 is charged the squared distance to the cloud2 point the LUT
    proposes for its cell, shrunk by the grid approximation so the charge
    never exceeds the distance to its true nearest neighbour.
    """
    pts1 = cloud1.points
    pts2 = cloud2.points
    n = len(pts1)
    LB = [0.0] * ((n // step) + 1)
    SAT = [0.0] * n

    for i in range(n):
        x, y = cloud1.cells[i]
        index = int(cloud2.lut[x, y])
        slack = 2.0 * cloud1.cell_offsets[i] + 2.0 * cloud2.grid_error
        d = max(0.0, GeometryUtils.calculate_distance(pts1[i], pts2[index]) - slack) ** 2
        SAT[i] = d if i == 0 else SAT[i - 1] + d
        LB[0] += (n - i) * d

    for i in range(step, n, step):
        LB[i // step] = LB[0] + i * SAT[n - 1] - n * SAT[i - 1]

    return LB


def cloud_match(candidate: QPointCloud, template: QPointCloud, min_so_far: float = math.inf,
                use_early_abandoning: bool = True) -> float:
    """
    Minimum matching cost between two clouds over sampled starting points.

    With use_early_abandoning the LUT lower bounds skip starting points that
    cannot beat min_so_far and exact matchings stop early; the result is
    then min_so_far when nothing better exists. Without it every starting
    point is matched exhaustively.
    """
    n = len(candidate.points)
    step = cloud_step(n)

    if not use_early_abandoning:
        best = math.inf
        for i in range(0, n, step):
            best = min(best,
                       cloud_distance(candidate.points, template.points, i),
                       cloud_distance(template.points, candidate.points, i))
        return best

    LB1 = compute_lower_bound(candidate, template, step)
    LB2 = compute_lower_bound(template, candidate, step)

    for i in range(0, n, step):
        j = i // step
        if LB1[j] < min_so_far:
            min_so_far = min(min_so_far, cloud_distance(candidate.points, template.points, i, min_so_far))
        if LB2[j] < min_so_far:
            min_so_far = min(min_so_far, cloud_distance(template.points, candidate.points, i, min_so_far))

    return min_so_far


class QDollarRecognizer(BaseRecognizer):
    """$Q Super-Quick Recognizer for gesture classification."""

    algorithm = '$Q'

    def __init__(self, resampling_points: int = RecognizerConfig.DEFAULT_RESAMPLING_POINTS,
                 use_early_abandoning: bool = True, n_jobs: Optional[int] = None):
        self.use_early_abandoning = use_early_abandoning
        super().__init__(resampling_points, n_jobs)

    def _make_template(self, name: str, path: Sequence[Any]) -> QPointCloud:
        points = PathUtils.to_points(path, default_stroke_id=1)
        PathUtils.require_points(points)
        return QPointCloud(name, points, self.resampling_points)

    def _score(self, candidate: QPointCloud, template: QPointCloud, bound: float) -> float:
        return cloud_match(candidate, template, bound, self.use_early_abandoning)
