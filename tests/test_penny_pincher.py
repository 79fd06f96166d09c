"""Unit tests for the Penny Pincher recognizer."""

import math

import pytest

from stroke_recognizers.gestures.base import NO_MATCH
from stroke_recognizers.gestures.penny_pincher import (
    PennyPincherRecognizer,
    dot_product_similarity,
    tangent_vectors,
)
from stroke_recognizers.utils.gesture_utils import Point

SHAPE_NAMES = ['square', 'line', 'triangle', 'circle', 'zigzag']


@pytest.fixture
def recognizer(shapes):
    """A recognizer holding one template per test shape."""
    r = PennyPincherRecognizer()
    for name in SHAPE_NAMES:
        r.add_template(name, shapes[name])
    return r


class TestTangentVectors:
    """Tests for the vector helpers."""

    def test_unit_vectors(self):
        """Vectors between points are normalized."""
        vectors = tangent_vectors([Point(0, 0), Point(3, 4), Point(3, 14)])
        assert vectors == [pytest.approx((0.6, 0.8)), pytest.approx((0.0, 1.0))]

    def test_zero_vector_passes_through(self):
        """Repeated points give an unnormalized zero vector."""
        assert tangent_vectors([Point(1, 1), Point(1, 1)]) == [(0, 0)]

    def test_similarity_is_sum_of_dot_products(self):
        """Similarity adds the dot products of corresponding vectors."""
        assert dot_product_similarity([(1, 0), (0, 1)], [(1, 0), (1, 0)]) == 1


class TestPennyPincherRecognizer:
    """Tests for PennyPincherRecognizer."""

    def test_higher_is_better(self):
        """Penny Pincher maximizes its score."""
        assert PennyPincherRecognizer.higher_is_better

    def test_templates_hold_n_minus_one_vectors(self, recognizer):
        """Every template keeps resampling_points - 1 vectors."""
        for template in recognizer.templates:
            assert len(template.vectors) == recognizer.resampling_points - 1

    @pytest.mark.parametrize('name', SHAPE_NAMES)
    def test_self_match_has_maximum_score(self, recognizer, shapes, name):
        """A registered path matches itself with one per vector."""
        result = recognizer.recognize(shapes[name])
        assert result.name == name
        assert result.score == pytest.approx(recognizer.resampling_points - 1)

    @pytest.mark.parametrize('name', SHAPE_NAMES)
    def test_scale_invariance(self, recognizer, shapes, transform, name):
        """Scaled and moved paths are recognized."""
        moved = transform(shapes[name], scale=4.0, dx=10, dy=-10)
        assert recognizer.recognize(moved).name == name

    def test_no_templates(self, shapes):
        """An empty recognizer reports no match with the worst score."""
        result = PennyPincherRecognizer().recognize(shapes['square'])
        assert result.name == NO_MATCH
        assert result.score == -math.inf

    def test_zero_length_path(self):
        """A path without extent scores zero against anything."""
        r = PennyPincherRecognizer()
        r.add_template('dot', [(5, 5), (5, 5)])
        result = r.recognize([(0, 0), (10, 0)])
        assert result.name == 'dot'
        assert result.score == 0.0
