"""
Common recognizer lifecycle: register templates, optionally train, recognize.

Every algorithm in this package keeps its templates in registration order
and reports a RecognitionResult. Template matching can run in a joblib
thread pool; the winner is still the first best template in registration
order, exactly as in the sequential scan.
"""

import math
import time
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from joblib import Parallel, delayed

from ..config.settings import RecognizerConfig
from ..utils.logger import RecognitionLogger

NO_MATCH = RecognizerConfig.NO_MATCH


@dataclass
class RecognitionResult:
    """Result of a recognition with name, score, and timing."""
    name: str
    score: float
    time_ms: float
    preprocessing_ms: float = 0.0
    matching_ms: float = 0.0

    @property
    def matched(self) -> bool:
        return self.name != NO_MATCH


def _now_ms() -> float:
    return time.time() * 1000


class BaseRecognizer:
    """
    Base class for template-matching recognizers.

    Subclasses build their template and candidate representations and
    provide a pairwise score. Distance-style recognizers keep the lowest
    score; set higher_is_better for similarity-style ones.
    """

    algorithm = 'base'
    higher_is_better = False

    def __init__(self, resampling_points: int = RecognizerConfig.DEFAULT_RESAMPLING_POINTS,
                 n_jobs: Optional[int] = None):
        """
        Initialize the recognizer.

        Args:
            resampling_points: Number of points every path is resampled to
            n_jobs: Worker threads used for matching; None or 1 matches sequentially
        """
        if resampling_points < 2:
            raise ValueError(f"resampling_points must be at least 2, got {resampling_points}")
        self.resampling_points = resampling_points
        self.n_jobs = n_jobs
        self.templates: List[Any] = []
        self.log = RecognitionLogger(self.algorithm)

    # Public API: add_template(), train(), recognize(), clear_templates()

    def add_template(self, name: str, path: Sequence[Any]) -> int:
        """Add a new template, returns count of templates with this name."""
        t0 = _now_ms()
        self.templates.append(self._make_template(name, path))
        count = sum(1 for t in self.templates if t.name == name)
        self.log.log_template_added(name, count, _now_ms() - t0)
        return count

    def train(self) -> float:
        """Template matchers need no training."""
        return 0.0

    def recognize(self, path: Sequence[Any], require_same_stroke_count: bool = False) -> RecognitionResult:
        """
        Recognize a path against the registered templates.

        Args:
            path: List of points, or list of strokes
            require_same_stroke_count: Only compare templates drawn with as
                many strokes as the candidate (multistroke recognizers)

        Returns:
            RecognitionResult, named NO_MATCH when no template qualifies
        """
        t0 = _now_ms()
        candidate = self._make_candidate(path)
        t1 = _now_ms()

        eligible = list(self._eligible_templates(candidate, require_same_stroke_count))
        index, score = self._best_template(candidate, eligible)
        t2 = _now_ms()

        name = eligible[index].name if index >= 0 else NO_MATCH
        score = self._final_score(score)
        result = RecognitionResult(name, score, t2 - t0, t1 - t0, t2 - t1)
        self.log.log_recognition(result)
        return result

    def clear_templates(self) -> None:
        """Delete all registered templates."""
        count = len(self.templates)
        self.templates = []
        self.log.log_templates_cleared(count)

    @property
    def template_count(self) -> int:
        return len(self.templates)

    @property
    def class_names(self) -> List[str]:
        """Registered class names, in order of first registration."""
        names = []
        for template in self.templates:
            if template.name not in names:
                names.append(template.name)
        return names

    # Hooks for subclasses

    def _make_template(self, name: str, path: Sequence[Any]) -> Any:
        raise NotImplementedError

    def _make_candidate(self, path: Sequence[Any]) -> Any:
        return self._make_template('', path)

    def _eligible_templates(self, candidate: Any, require_same_stroke_count: bool) -> Iterable[Any]:
        return self.templates

    def _score(self, candidate: Any, template: Any, bound: float) -> float:
        """
        Score candidate against template.

        bound is the best score found so far; a distance-style score may
        stop early and return any value that is not better than bound.
        """
        raise NotImplementedError

    def _accepts(self, score: float) -> bool:
        return True

    def _pruning_bound(self, best: float) -> float:
        return best

    def _final_score(self, score: float) -> float:
        return score

    # Matching

    def _worst_score(self) -> float:
        return -math.inf if self.higher_is_better else math.inf

    def _is_better(self, score: float, best: float) -> bool:
        return score > best if self.higher_is_better else score < best

    def _best_template(self, candidate: Any, templates: Sequence[Any]) -> Tuple[int, float]:
        """Return (index, score) of the first best template, or (-1, worst score)."""
        best_index = -1
        best = self._worst_score()

        if self.n_jobs not in (None, 1) and len(templates) > 1:
            bound = self._pruning_bound(best)
            scores = Parallel(n_jobs=self.n_jobs, prefer='threads')(
                delayed(self._score)(candidate, template, bound) for template in templates
            )
        else:
            scores = None

        for i, template in enumerate(templates):
            if scores is not None:
                score = scores[i]
            else:
                score = self._score(candidate, template, self._pruning_bound(best))
            if self._accepts(score) and self._is_better(score, best):
                best = score
                best_index = i

        return best_index, best
