"""Shared pytest fixtures for the stroke_recognizers test suite.

Fixtures:
    shapes: Single-stroke paths as lists of {'x', 'y', 't'} dicts
    letters: Multistroke letters (T, X, H, I, line) as lists of strokes
    transform: Rotate, scale and translate a path or a list of strokes
    noisy_examples: Jittered, timestamped squares and lines for the classifier
    package_logger: The package logger, restored after the test
"""

import logging
import math
import random
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from stroke_recognizers.utils.logger import PACKAGE_LOGGER


def _path(coords):
    return [{'x': x, 'y': y, 't': i} for i, (x, y) in enumerate(coords)]


SHAPES = {
    'square': _path([(0, 0), (100, 0), (100, 100), (0, 100)]),
    'line': _path([(0, 0), (100, 0)]),
    'triangle': _path([(0, 100), (50, 0), (100, 100), (0, 100)]),
    'circle': _path([(50 + 50 * math.cos(2 * math.pi * i / 16),
                      50 + 50 * math.sin(2 * math.pi * i / 16)) for i in range(17)]),
    'zigzag': _path([(0, 0), (25, 100), (50, 0), (75, 100), (100, 0)]),
}

# One list of (x, y) per stroke
LETTERS = {
    'T': [[(100, 50), (200, 50)], [(150, 50), (150, 150)]],
    'line': [[(50, 100), (200, 100)]],
    'X': [[(50, 50), (150, 150)], [(150, 50), (50, 150)]],
    'H': [[(50, 50), (50, 150)], [(50, 100), (150, 100)], [(150, 50), (150, 150)]],
    'I': [[(100, 50), (100, 150)], [(70, 50), (130, 50)], [(70, 150), (130, 150)]],
}


def _transform_point(p, angle, scale, dx, dy):
    cos = math.cos(angle)
    sin = math.sin(angle)
    if isinstance(p, dict):
        x, y = p['x'], p['y']
    else:
        x, y = p
    nx = (x * cos - y * sin) * scale + dx
    ny = (x * sin + y * cos) * scale + dy
    if isinstance(p, dict):
        moved = dict(p)
        moved['x'] = nx
        moved['y'] = ny
        return moved
    return (nx, ny)


def transform_path(path, angle=0.0, scale=1.0, dx=0.0, dy=0.0):
    """Rotate by angle (radians) about the origin, scale, then translate."""
    first = path[0]
    if isinstance(first, list):
        return [[_transform_point(p, angle, scale, dx, dy) for p in stroke] for stroke in path]
    return [_transform_point(p, angle, scale, dx, dy) for p in path]


def _jittered_examples(rng, name, count):
    examples = []
    for _ in range(count):
        size = rng.uniform(80, 120)
        if name == 'square':
            corners = [(0, 0), (1, 0), (1, 1), (0, 1)]
            coords = []
            for (x0, y0), (x1, y1) in zip(corners, corners[1:]):
                for k in range(10):
                    coords.append((x0 + (x1 - x0) * k / 10, y0 + (y1 - y0) * k / 10))
            coords.append(corners[-1])
        else:
            coords = [(k / 20, 0.0) for k in range(21)]

        t = 0.0
        points = []
        for x, y in coords:
            points.append({'x': x * size + rng.uniform(-0.5, 0.5),
                           'y': y * size + rng.uniform(-0.5, 0.5),
                           't': t})
            t += rng.uniform(8, 12)
        examples.append(points)
    return examples


@pytest.fixture
def shapes():
    """Single-stroke test shapes."""
    return {name: [dict(p) for p in path] for name, path in SHAPES.items()}


@pytest.fixture
def letters():
    """Multistroke letters."""
    return {name: [list(stroke) for stroke in strokes] for name, strokes in LETTERS.items()}


@pytest.fixture
def transform():
    """The transform_path helper."""
    return transform_path


@pytest.fixture
def noisy_examples():
    """Returns a function (name, count, seed) -> list of jittered paths."""
    def make(name, count, seed=0):
        return _jittered_examples(random.Random(seed), name, count)
    return make


@pytest.fixture
def package_logger():
    """The package logger, with its handlers and level restored afterwards."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = logger.handlers.copy()
    level = logger.level
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers = handlers
    logger.setLevel(level)
