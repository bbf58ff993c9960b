"""
Selection of the winning attempt.
"""
from typing import Sequence

from imagerace.models import CompressionAttempt

# Not-worth-it guard: at quality above HIGH_QUALITY_THRESHOLD, a result of at
# least NOT_WORTH_IT_RATIO of the original size is replaced by the original
NOT_WORTH_IT_RATIO = 0.98
HIGH_QUALITY_THRESHOLD = 0.85


def best_successful(attempts: Sequence[CompressionAttempt]):
    """Smallest successful attempt, first in dispatch order on ties; None if none succeeded."""
    best = None
    for attempt in attempts:
        if not attempt.succeeded:
            continue
        if best is None or attempt.output_size < best.output_size:
            best = attempt
    return best


def is_not_worth_it(size: int, original_size: int, quality: float) -> bool:
    return size >= original_size * NOT_WORTH_IT_RATIO and quality > HIGH_QUALITY_THRESHOLD


def arbitrate(
    attempts: Sequence[CompressionAttempt],
    original: bytes,
    quality: float
) -> CompressionAttempt:
    """
    Pick the winning attempt.

    1. No successful attempt: the synthetic original wins.
    2. Otherwise the smallest successful output wins, earliest on ties.
    3. If that winner is not worth it at the requested quality, the
       synthetic original wins instead.

    Args:
        attempts: Attempts in dispatch order
        original: The input bytes
        quality: Requested quality (0-1)

    Returns:
        The winning attempt
    """
    best = best_successful(attempts)
    if best is None:
        return CompressionAttempt.original(original)
    if is_not_worth_it(best.output_size, len(original), quality):
        return CompressionAttempt.original(original)
    return best
