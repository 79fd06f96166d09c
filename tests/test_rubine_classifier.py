"""Unit tests for the Rubine statistical classifier."""

import math

import numpy as np
import pytest

from stroke_recognizers.config.settings import RecognizerConfig
from stroke_recognizers.exceptions import DegeneratePathError, SingularMatrixError
from stroke_recognizers.gestures.base import NO_MATCH
from stroke_recognizers.gestures.rubine_classifier import (
    NUM_FEATURES,
    RubineClassifier,
    compute_feature_vector,
    filter_points,
    invert,
)
from stroke_recognizers.utils.gesture_utils import Point


@pytest.fixture
def trained(noisy_examples):
    """A classifier trained on 20 squares and 20 lines."""
    r = RubineClassifier()
    for path in noisy_examples('square', 20, seed=1):
        r.add_example('square', path)
    for path in noisy_examples('line', 20, seed=2):
        r.add_example('line', path)
    r.train()
    return r


class TestFeatures:
    """Tests for feature extraction."""

    def test_feature_count(self):
        """There is one value per named feature."""
        assert NUM_FEATURES == len(RecognizerConfig.RUBINE_FEATURES) == 13

    def test_straight_line(self):
        """Features of a timed straight line."""
        points = [Point(0, 0, t=0), Point(50, 0, t=10), Point(100, 0, t=20)]
        features = compute_feature_vector(points)
        expected = [1, 0, 1, 0, 1, 1, 0, 1, 0, 0, 0, 0.0025, 20]
        assert features.tolist() == pytest.approx(expected)

    def test_right_angle_turn(self):
        """Turning angles are accumulated with their sign."""
        points = [Point(0, 0, t=0), Point(100, 0, t=1), Point(100, 100, t=2)]
        features = compute_feature_vector(points)
        assert features[8] == pytest.approx(-math.pi / 2)
        assert features[9] == pytest.approx(math.pi / 2)
        assert features[10] == pytest.approx(math.pi ** 2 / 4)
        assert features[12] == 2

    def test_missing_timestamps_count_as_zero(self):
        """Without timestamps the duration is zero and speed is the squared step."""
        points = [Point(0, 0), Point(50, 0), Point(100, 0)]
        features = compute_feature_vector(points)
        assert features[11] == pytest.approx(0.25)
        assert features[12] == 0

    @pytest.mark.parametrize('coords', [[(0, 0)], [(0, 0), (1, 1)], [(0, 0), (0, 0), (0, 0), (1, 0)]])
    def test_too_few_points_give_zero_vector(self, coords):
        """Fewer than three distinct points degenerate to zeros."""
        features = compute_feature_vector([Point(x, y) for x, y in coords])
        assert features.tolist() == [0.0] * NUM_FEATURES

    def test_filter_drops_jitter(self):
        """Points too close to the last kept point are dropped."""
        points = [Point(0, 0), Point(0.0001, 0), Point(0.5, 0), Point(0.5, 0.0002), Point(1, 0)]
        assert filter_points(points) == [Point(0, 0), Point(0.5, 0), Point(1, 0)]


class TestInvert:
    """Tests for Gauss-Jordan inversion."""

    def test_inverse(self):
        """The product with the inverse is the identity."""
        matrix = np.array([[4.0, 7.0, 2.0], [3.0, 6.0, 1.0], [2.0, 5.0, 3.0]])
        assert np.allclose(matrix @ invert(matrix), np.eye(3))

    def test_zero_pivot_is_swapped(self):
        """A zero on the diagonal is fixed by swapping rows."""
        matrix = np.array([[0.0, 1.0], [1.0, 0.0]])
        assert np.allclose(invert(matrix), matrix)

    def test_singular(self):
        """Singular matrices give None."""
        assert invert(np.array([[1.0, 2.0], [2.0, 4.0]])) is None
        assert invert(np.zeros((3, 3))) is None

    def test_input_not_modified(self):
        """The matrix passed in is left untouched."""
        matrix = np.array([[0.0, 2.0], [1.0, 0.0]])
        invert(matrix)
        assert matrix.tolist() == [[0.0, 2.0], [1.0, 0.0]]


class TestRubineClassifier:
    """Tests for RubineClassifier."""

    def test_untrained_reports_no_match(self, noisy_examples):
        """Recognizing before training gives no match."""
        r = RubineClassifier()
        for path in noisy_examples('square', 3):
            r.add_example('square', path)
        result = r.recognize(noisy_examples('square', 1, seed=9)[0])
        assert result.name == NO_MATCH
        assert result.score == -math.inf

    def test_training_gate(self, noisy_examples):
        """A class with a single example prevents training."""
        r = RubineClassifier()
        for path in noisy_examples('square', 5):
            r.add_example('square', path)
        r.add_example('line', noisy_examples('line', 1)[0])

        assert r.train() == 0.0
        assert not r.trained
        assert r.recognize(noisy_examples('line', 1, seed=5)[0]).name == NO_MATCH

    def test_train_without_examples(self):
        """Training an empty classifier does nothing."""
        r = RubineClassifier()
        assert r.train() == 0.0
        assert not r.trained

    def test_add_example_counts_per_class(self, noisy_examples):
        """add_example returns the number of examples of that class."""
        r = RubineClassifier()
        squares = noisy_examples('square', 2)
        assert r.add_example('square', squares[0]) == 1
        assert r.add_example('line', noisy_examples('line', 1)[0]) == 1
        assert r.add_example('square', squares[1]) == 2

    def test_degenerate_example_raises(self):
        """Examples need at least two points."""
        with pytest.raises(DegeneratePathError):
            RubineClassifier().add_example('dot', [(1, 1)])

    @pytest.mark.parametrize('seed', [1, 2, 30, 31])
    def test_recognition(self, trained, noisy_examples, seed):
        """Training examples and fresh ones are classified correctly."""
        assert trained.trained
        assert trained.recognize(noisy_examples('square', 1, seed=seed)[0]).name == 'square'
        assert trained.recognize(noisy_examples('line', 1, seed=seed)[0]).name == 'line'

    def test_train_is_idempotent(self, trained):
        """Training again without new examples is skipped."""
        assert trained.train() == 0.0
        assert trained.trained

    def test_new_example_invalidates_model(self, trained, noisy_examples):
        """Adding an example requires training again."""
        trained.add_example('square', noisy_examples('square', 1, seed=7)[0])
        assert not trained.trained
        assert trained.recognize(noisy_examples('square', 1, seed=8)[0]).name == NO_MATCH
        trained.train()
        assert trained.recognize(noisy_examples('square', 1, seed=8)[0]).name == 'square'

    def test_clear_templates(self, trained, noisy_examples):
        """Clearing drops the examples and the model."""
        trained.clear_templates()
        assert trained.template_count == 0
        assert not trained.trained
        assert trained.recognize(noisy_examples('line', 1)[0]).name == NO_MATCH

    def test_singular_covariance_raises(self, noisy_examples):
        """Identical examples give a singular covariance matrix."""
        r = RubineClassifier()
        square = noisy_examples('square', 1)[0]
        line = noisy_examples('line', 1)[0]
        for _ in range(2):
            r.add_example('square', square)
            r.add_example('line', line)

        with pytest.raises(SingularMatrixError):
            r.train()
        assert not r.trained
        assert r.recognize(square).name == NO_MATCH

    def test_deterministic(self, trained, noisy_examples):
        """The same input gives the same result."""
        path = noisy_examples('square', 1, seed=11)[0]
        r1 = trained.recognize(path)
        r2 = trained.recognize(path)
        assert (r1.name, r1.score) == (r2.name, r2.score)
