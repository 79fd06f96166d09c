"""
Shared utilities for stroke gesture recognition.

This module provides the point type, the path conversions accepted at the
recognizer boundary and the resampling/normalization steps reused by every
recognition algorithm.
"""

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, List, Optional, Sequence, Tuple

from ..exceptions import DegeneratePathError


@dataclass(frozen=True)
class Point:
    """A 2D point, optionally tagged with a stroke id and a timestamp."""
    x: float
    y: float
    stroke_id: Optional[int] = None
    t: Optional[float] = None

    def __repr__(self):
        if self.stroke_id is None:
            return f"Point({self.x:.1f}, {self.y:.1f})"
        return f"Point({self.x:.1f}, {self.y:.1f}, stroke={self.stroke_id})"

    def with_coords(self, x: float, y: float) -> 'Point':
        """Return a copy moved to (x, y), keeping stroke id and timestamp."""
        return Point(x, y, self.stroke_id, self.t)

    def distance_to(self, other: 'Point') -> float:
        """Calculate Euclidean distance to another point."""
        return math.sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2)


ORIGIN = Point(0.0, 0.0)


class GeometryUtils:
    """Utility class for geometric calculations and normalization."""

    @staticmethod
    def calculate_distance(p1: Point, p2: Point) -> float:
        """Calculate Euclidean distance between two points."""
        dx = p2.x - p1.x
        dy = p2.y - p1.y
        return math.sqrt(dx * dx + dy * dy)

    @staticmethod
    def calculate_squared_distance(p1: Point, p2: Point) -> float:
        """Calculate squared Euclidean distance between two points."""
        dx = p2.x - p1.x
        dy = p2.y - p1.y
        return dx * dx + dy * dy

    @staticmethod
    def calculate_centroid(points: Sequence[Point]) -> Point:
        """Calculate the centroid of a list of points."""
        if not points:
            return ORIGIN
        sum_x = sum(p.x for p in points)
        sum_y = sum(p.y for p in points)
        return Point(sum_x / len(points), sum_y / len(points))

    @staticmethod
    def calculate_bounding_box(points: Sequence[Point]) -> Tuple[float, float, float, float]:
        """Return (min_x, min_y, width, height) of the points."""
        min_x = min(p.x for p in points)
        max_x = max(p.x for p in points)
        min_y = min(p.y for p in points)
        max_y = max(p.y for p in points)
        return min_x, min_y, max_x - min_x, max_y - min_y

    @staticmethod
    def calculate_path_length(points: Sequence[Point], stroke_aware: bool = False) -> float:
        """
        Calculate total path length.

        With stroke_aware set, the jump between the last point of a stroke
        and the first point of the next one is not counted.
        """
        length = 0.0
        for i in range(1, len(points)):
            if stroke_aware and points[i].stroke_id != points[i - 1].stroke_id:
                continue
            length += GeometryUtils.calculate_distance(points[i - 1], points[i])
        return length

    @staticmethod
    def resample(points: Sequence[Point], n: int, stroke_aware: bool = False) -> List[Point]:
        """
        Resample a path into exactly n points spaced equally along its length.

        The walk is forward-only: each interpolated point becomes the start
        of the remaining part of its segment, and the caller's sequence is
        never modified.

        Args:
            points: Path with at least 2 points
            n: Number of output points (at least 2)
            stroke_aware: Skip the segments that join two different strokes

        Returns:
            List of n points

        Raises:
            DegeneratePathError: If the path has fewer than 2 points or n < 2
        """
        if len(points) < 2:
            raise DegeneratePathError(f"Resampling needs at least 2 points, got {len(points)}")
        if n < 2:
            raise DegeneratePathError(f"Resampling count must be at least 2, got {n}")

        total_length = GeometryUtils.calculate_path_length(points, stroke_aware)
        if total_length == 0:
            return [points[0]] * n

        interval = total_length / (n - 1)
        D = 0.0
        resampled = [points[0]]
        prev = points[0]
        for curr in points[1:]:
            if stroke_aware and curr.stroke_id != prev.stroke_id:
                prev = curr
                continue
            d = GeometryUtils.calculate_distance(prev, curr)
            while D + d >= interval and d > 0:
                ratio = (interval - D) / d
                qx = prev.x + ratio * (curr.x - prev.x)
                qy = prev.y + ratio * (curr.y - prev.y)
                qt = None
                if prev.t is not None and curr.t is not None:
                    qt = prev.t + ratio * (curr.t - prev.t)
                q = Point(qx, qy, curr.stroke_id, qt)
                resampled.append(q)
                # the rest of the segment is measured from q
                prev = q
                d = GeometryUtils.calculate_distance(prev, curr)
                D = 0.0
            D += d
            prev = curr

        # sometimes we fall a rounding-error short of adding the last point
        while len(resampled) < n:
            resampled.append(points[-1])
        return resampled[:n]

    @staticmethod
    def indicative_angle(points: Sequence[Point]) -> float:
        """Angle from the first point to the centroid."""
        centroid = GeometryUtils.calculate_centroid(points)
        return math.atan2(centroid.y - points[0].y, centroid.x - points[0].x)

    @staticmethod
    def rotate_points(points: Sequence[Point], angle: float, centroid: Optional[Point] = None) -> List[Point]:
        """Rotate points around a centroid."""
        if centroid is None:
            centroid = GeometryUtils.calculate_centroid(points)

        cos = math.cos(angle)
        sin = math.sin(angle)
        rotated = []
        for point in points:
            dx = point.x - centroid.x
            dy = point.y - centroid.y
            rotated.append(point.with_coords(dx * cos - dy * sin + centroid.x,
                                             dx * sin + dy * cos + centroid.y))
        return rotated

    @staticmethod
    def scale_to_square(points: Sequence[Point], size: float) -> List[Point]:
        """
        Scale each axis independently so the bounding box becomes size x size.

        An axis with zero extent is left unscaled.
        """
        _, _, width, height = GeometryUtils.calculate_bounding_box(points)
        scale_x = size / width if width > 0 else 1.0
        scale_y = size / height if height > 0 else 1.0
        return [p.with_coords(p.x * scale_x, p.y * scale_y) for p in points]

    @staticmethod
    def scale_dim_to(points: Sequence[Point], size: float, ratio_1d: float) -> List[Point]:
        """
        Scale uniformly for 1-D gestures and per axis for 2-D gestures.

        A gesture is 1-D when min(w/h, h/w) <= ratio_1d; a zero extent on
        either axis counts as 1-D.
        """
        _, _, width, height = GeometryUtils.calculate_bounding_box(points)
        if width == 0 or height == 0:
            uniformly = True
        else:
            uniformly = min(width / height, height / width) <= ratio_1d

        if uniformly:
            longest = max(width, height)
            if longest == 0:
                return list(points)
            scale_x = scale_y = size / longest
        else:
            scale_x = size / width
            scale_y = size / height
        return [p.with_coords(p.x * scale_x, p.y * scale_y) for p in points]

    @staticmethod
    def scale_to_unit(points: Sequence[Point]) -> List[Point]:
        """Shift to the bounding-box corner and scale uniformly into [0, 1]."""
        min_x, min_y, width, height = GeometryUtils.calculate_bounding_box(points)
        size = max(width, height)
        if size == 0:
            size = 1.0
        return [p.with_coords((p.x - min_x) / size, (p.y - min_y) / size) for p in points]

    @staticmethod
    def translate_to(points: Sequence[Point], target: Point = ORIGIN) -> List[Point]:
        """Translate points so their centroid lands on target."""
        centroid = GeometryUtils.calculate_centroid(points)
        return [p.with_coords(p.x + target.x - centroid.x, p.y + target.y - centroid.y)
                for p in points]


class PathUtils:
    """Conversions between caller-supplied paths and Point lists."""

    @staticmethod
    def convert_to_point(item: Any, stroke_id: Optional[int] = None) -> Point:
        """
        Convert one caller point into a Point.

        Accepts Point objects, dicts with 'x', 'y' and optional 'stroke_id'
        and 't' keys, or (x, y) pairs. stroke_id is applied when the item
        carries none.
        """
        if isinstance(item, Point):
            if item.stroke_id is None and stroke_id is not None:
                return Point(item.x, item.y, stroke_id, item.t)
            return item

        try:
            if isinstance(item, dict):
                x = float(item['x'])
                y = float(item['y'])
                t = float(item['t']) if item.get('t') is not None else None
                sid = item.get('stroke_id')
                sid = int(sid) if sid is not None else stroke_id
                return Point(x, y, sid, t)
            x, y = item
            return Point(float(x), float(y), stroke_id)
        except (KeyError, TypeError, ValueError) as e:
            raise DegeneratePathError(f"Invalid point {item!r}: {e}") from e

    @staticmethod
    def is_multistroke(path: Sequence[Any]) -> bool:
        """True when path is a list of strokes rather than a list of points."""
        if not path:
            return False
        first = path[0]
        if isinstance(first, (Point, dict)):
            return False
        try:
            inner = first[0]
        except (TypeError, IndexError, KeyError):
            return False
        return not isinstance(inner, Real)

    @staticmethod
    def to_strokes(path: Sequence[Any]) -> List[List[Point]]:
        """
        Convert a path into a list of strokes.

        A list of strokes keeps its structure and each stroke gets the
        stroke id 1..k unless its points carry one. A single path is split
        wherever the stroke id changes.
        """
        if PathUtils.is_multistroke(path):
            strokes = []
            for index, stroke in enumerate(path):
                points = [PathUtils.convert_to_point(p, index + 1) for p in stroke]
                if points:
                    strokes.append(points)
            return strokes

        strokes: List[List[Point]] = []
        for item in path:
            point = PathUtils.convert_to_point(item)
            if strokes and strokes[-1][-1].stroke_id == point.stroke_id:
                strokes[-1].append(point)
            else:
                strokes.append([point])
        return strokes

    @staticmethod
    def to_points(path: Sequence[Any], default_stroke_id: Optional[int] = None) -> List[Point]:
        """Convert a single path or a list of strokes into one Point list."""
        if PathUtils.is_multistroke(path):
            return PathUtils.flatten(PathUtils.to_strokes(path))
        return [PathUtils.convert_to_point(p, default_stroke_id) for p in path]

    @staticmethod
    def flatten(strokes: Sequence[Sequence[Point]]) -> List[Point]:
        """Concatenate strokes into one path."""
        return [p for stroke in strokes for p in stroke]

    @staticmethod
    def require_points(points: Sequence[Point], minimum: int = 2) -> None:
        """Raise DegeneratePathError unless points holds at least minimum items."""
        if len(points) < minimum:
            raise DegeneratePathError(f"Need at least {minimum} points, got {len(points)}")
