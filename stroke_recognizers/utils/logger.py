"""
Logging utilities for template registration, training and recognition.
"""

import datetime
import logging
from typing import Optional

PACKAGE_LOGGER = 'stroke_recognizers'


def configure_logging(level: int = logging.INFO, debug_file: Optional[str] = None) -> logging.Logger:
    """
    Attach handlers to the package logger.

    Args:
        level: Level for the console handler
        debug_file: Optional file that receives every record at DEBUG level

    Returns:
        The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if debug_file else level)

    formatter = logging.Formatter('[%(asctime)s] %(name)s %(levelname)s: %(message)s')
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if debug_file:
        try:
            file_handler = logging.FileHandler(debug_file, mode='w')
        except OSError as e:
            logger.warning(f"Could not open debug file '{debug_file}': {e}")
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
            logger.debug(f"Debug logging started at {datetime.datetime.now()}")

    return logger


class RecognitionLogger:
    """Reports recognizer activity through the standard logging module."""

    def __init__(self, algorithm: str, name: str = PACKAGE_LOGGER):
        self.algorithm = algorithm
        self.logger = logging.getLogger(name)

    def log_template_added(self, class_name: str, count: int, elapsed_ms: float):
        """Log a template registration."""
        self.logger.info(f"[{self.algorithm}] added template '{class_name}' "
                         f"({count} for this class) in {elapsed_ms:.2f}ms")

    def log_templates_cleared(self, count: int):
        """Log removal of all templates."""
        self.logger.info(f"[{self.algorithm}] cleared {count} templates")

    def log_training(self, num_classes: int, num_examples: int, elapsed_ms: float):
        """Log a successful training run."""
        self.logger.info(f"[{self.algorithm}] trained on {num_examples} examples "
                         f"of {num_classes} classes in {elapsed_ms:.2f}ms")

    def log_training_skipped(self, reason: str):
        """Log a training call that did nothing."""
        self.logger.debug(f"[{self.algorithm}] training skipped: {reason}")

    def log_training_failed(self, error: Exception):
        """Log a training failure."""
        self.logger.warning(f"[{self.algorithm}] training failed: {error}")

    def log_recognition(self, result) -> None:
        """Log a recognition result."""
        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        self.logger.debug(f"[{self.algorithm}] recognized '{result.name}' score={result.score:.4f} "
                          f"[prep {result.preprocessing_ms:.2f}ms, "
                          f"match {result.matching_ms:.2f}ms, total {result.time_ms:.2f}ms]")
