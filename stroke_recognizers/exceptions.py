"""
Exceptions raised by the stroke recognizers.

Missing templates, filtered-out templates and untrained models are not
errors: they surface as a "No match" result.
"""


class RecognizerError(Exception):
    """Base class for recognizer failures."""


class DegeneratePathError(RecognizerError, ValueError):
    """Raised when a path cannot be resampled or holds malformed points."""


class SingularMatrixError(RecognizerError, ArithmeticError):
    """Raised when the pooled covariance matrix of a classifier cannot be inverted."""
