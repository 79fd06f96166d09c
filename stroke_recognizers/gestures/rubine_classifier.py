"""
Rubine Statistical Gesture Classifier

Each example is reduced to 13 geometric and dynamic features. Training
estimates a mean feature vector per class and one covariance matrix pooled
over all classes; its inverse turns every class into a linear
discriminant. Recognition picks the class with the largest discriminant.

Reference: Dean Rubine, "Specifying gestures by example", SIGGRAPH 1991.
"""

import logging
import math
from typing import Any, List, Optional, Sequence

import numpy as np

from .base import BaseRecognizer, _now_ms
from ..config.settings import RecognizerConfig
from ..exceptions import SingularMatrixError
from ..utils.gesture_utils import Point, GeometryUtils, PathUtils

logger = logging.getLogger(__name__)

NUM_FEATURES = len(RecognizerConfig.RUBINE_FEATURES)


def filter_points(points: Sequence[Point], min_distance: float = RecognizerConfig.RUBINE_FILTER_DISTANCE) -> List[Point]:
    """Drop points closer than min_distance to the previously kept point."""
    if not points:
        return []
    kept = [points[0]]
    for point in points[1:]:
        if GeometryUtils.calculate_distance(kept[-1], point) > min_distance:
            kept.append(point)
    return kept


def _unit(dx: float, dy: float):
    length = math.sqrt(dx * dx + dy * dy)
    if length == 0:
        return dx, dy
    return dx / length, dy / length


def compute_feature_vector(points: Sequence[Point]) -> np.ndarray:
    """
    Compute the 13 Rubine features of a path.

    The path is scaled into the unit square and filtered first. Fewer than
    3 remaining points give the zero vector. Missing timestamps count as 0.

    Args:
        points: Path points, optionally timestamped

    Returns:
        Array of NUM_FEATURES floats, ordered as RecognizerConfig.RUBINE_FEATURES
    """
    if len(points) < 3:
        return np.zeros(NUM_FEATURES)
    pts = filter_points(GeometryUtils.scale_to_unit(points))
    if len(pts) < 3:
        return np.zeros(NUM_FEATURES)

    x = np.array([p.x for p in pts])
    y = np.array([p.y for p in pts])
    t = np.array([p.t if p.t is not None else 0.0 for p in pts])

    features = np.zeros(NUM_FEATURES)

    # initial direction
    features[0], features[1] = _unit(x[2] - x[0], y[2] - y[0])

    # bounding box diagonal
    width = x.max() - x.min()
    height = y.max() - y.min()
    features[2] = math.sqrt(width * width + height * height)
    features[3] = math.atan2(height, width)

    # start to end
    dx = x[-1] - x[0]
    dy = y[-1] - y[0]
    features[4] = math.sqrt(dx * dx + dy * dy)
    features[5], features[6] = _unit(dx, dy)

    dx = np.diff(x)
    dy = np.diff(y)
    dt = np.diff(t)
    squared = dx ** 2 + dy ** 2
    features[7] = np.sum(np.sqrt(squared))

    # turning angle between consecutive segments
    angles = np.arctan2(dx[1:] * dy[:-1] - dx[:-1] * dy[1:],
                        dx[1:] * dx[:-1] + dy[1:] * dy[:-1])
    features[8] = np.sum(angles)
    features[9] = np.sum(np.abs(angles))
    features[10] = np.sum(angles ** 2)

    dt2 = dt ** 2
    speeds = np.where(dt2 == 0, squared, squared / np.where(dt2 == 0, 1.0, dt2))
    features[11] = speeds.max()
    features[12] = t[-1] - t[0]

    return features


def invert(matrix: np.ndarray) -> Optional[np.ndarray]:
    """
    Invert a square matrix by Gauss-Jordan elimination.

    A zero pivot is swapped with the first row below holding a non-zero
    entry in that column. Returns None when no such row exists.
    """
    size = matrix.shape[0]
    C = np.array(matrix, dtype=float)
    I = np.eye(size)

    for i in range(size):
        e = C[i, i]
        if e == 0:
            for ii in range(i + 1, size):
                if C[ii, i] != 0:
                    C[[i, ii]] = C[[ii, i]]
                    I[[i, ii]] = I[[ii, i]]
                    break
            e = C[i, i]
            if e == 0:
                return None  # singular

        C[i] = C[i] / e
        I[i] = I[i] / e
        for ii in range(size):
            if ii == i:
                continue
            e = C[ii, i]
            C[ii] -= e * C[i]
            I[ii] -= e * I[i]

    return I


class RubineExample:
    """A raw training example."""

    def __init__(self, name: str, points: Sequence[Point]):
        self.name = name
        self.points = list(points)


class GestureClassModel:
    """Linear discriminant of one gesture class."""

    def __init__(self, name: str, mean: np.ndarray, weights: np.ndarray, bias: float):
        self.name = name
        self.mean = mean
        self.weights = weights
        self.bias = bias

    def evaluate(self, features: np.ndarray) -> float:
        return float(self.bias + self.weights @ features)


class RubineClassifier(BaseRecognizer):
    """
    Rubine classifier.

    Examples are registered with add_example (or add_template); train()
    must succeed before recognize() reports anything but NO_MATCH, and
    adding an example invalidates the trained model.
    """

    algorithm = 'Rubine'
    higher_is_better = True

    def __init__(self, resampling_points: int = RecognizerConfig.DEFAULT_RESAMPLING_POINTS,
                 n_jobs: Optional[int] = None):
        super().__init__(resampling_points, n_jobs)
        self.models: Optional[List[GestureClassModel]] = None

    @property
    def trained(self) -> bool:
        return self.models is not None

    def add_template(self, name: str, path: Sequence[Any]) -> int:
        """Add a training example, returns count of examples of this class."""
        count = super().add_template(name, path)
        self.models = None
        return count

    add_example = add_template

    def clear_templates(self) -> None:
        super().clear_templates()
        self.models = None

    def train(self) -> float:
        """
        Fit one linear discriminant per class.

        Returns:
            Elapsed milliseconds, 0.0 when the model is current or some
            class has fewer than RUBINE_MIN_EXAMPLES examples

        Raises:
            SingularMatrixError: If the pooled covariance matrix is singular
        """
        if self.trained:
            return 0.0

        t0 = _now_ms()
        classes = self.class_names
        examples = {name: [e for e in self.templates if e.name == name] for name in classes}
        if not classes:
            self.log.log_training_skipped("no examples")
            return 0.0
        for name in classes:
            if len(examples[name]) < RecognizerConfig.RUBINE_MIN_EXAMPLES:
                self.log.log_training_skipped(
                    f"class '{name}' has {len(examples[name])} examples, "
                    f"{RecognizerConfig.RUBINE_MIN_EXAMPLES} required")
                return 0.0

        means = {}
        pooled = np.zeros((NUM_FEATURES, NUM_FEATURES))
        for name in classes:
            features = np.array([compute_feature_vector(e.points) for e in examples[name]])
            means[name] = features.mean(axis=0)
            deviations = features - means[name]
            covariance = deviations.T @ deviations / (len(features) - 1)
            pooled += (len(features) - 1) * covariance

        degrees = len(self.templates) - len(classes)
        if degrees != 0:
            pooled /= degrees
        logger.debug(f"pooled covariance over {len(self.templates)} examples:\n{pooled}")

        inverse = invert(pooled)
        if inverse is None:
            error = SingularMatrixError(
                f"pooled covariance of {len(classes)} classes is singular")
            self.log.log_training_failed(error)
            raise error

        models = []
        for name in classes:
            weights = inverse @ means[name]
            bias = -0.5 * float(weights @ means[name])
            models.append(GestureClassModel(name, means[name], weights, bias))
        self.models = models

        elapsed = _now_ms() - t0
        self.log.log_training(len(classes), len(self.templates), elapsed)
        return elapsed

    def _make_template(self, name: str, path: Sequence[Any]) -> RubineExample:
        points = PathUtils.to_points(path)
        PathUtils.require_points(points)
        return RubineExample(name, points)

    def _make_candidate(self, path: Sequence[Any]) -> np.ndarray:
        return compute_feature_vector(PathUtils.to_points(path))

    def _eligible_templates(self, candidate: np.ndarray, require_same_stroke_count: bool) -> List[GestureClassModel]:
        return self.models or []

    def _score(self, candidate: np.ndarray, template: GestureClassModel, bound: float) -> float:
        return template.evaluate(candidate)
