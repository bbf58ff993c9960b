from imagerace.core.arbitration import arbitrate, best_successful
from imagerace.models import BackendId, CompressionAttempt
from tests.conftest import png_bytes

ORIGINAL = png_bytes(100)


def ok(backend, size, duration=5):
    return CompressionAttempt.success(backend, png_bytes(size), duration)


def failed(backend):
    return CompressionAttempt.failure(backend, ORIGINAL, "boom", 3)


def test_smallest_success_wins():
    attempts = [ok(BackendId.PILLOW, 80), ok(BackendId.CLI, 60), ok(BackendId.TINIFY, 70)]
    assert arbitrate(attempts, ORIGINAL, 0.6).backend == BackendId.CLI


def test_tie_goes_to_earliest_dispatched():
    attempts = [ok(BackendId.PILLOW, 90), ok(BackendId.CLI, 50), ok(BackendId.TINIFY, 50)]
    for _ in range(5):
        assert arbitrate(attempts, ORIGINAL, 0.6).backend == BackendId.CLI


def test_failures_are_ignored():
    attempts = [failed(BackendId.PILLOW), ok(BackendId.CLI, 90)]
    assert arbitrate(attempts, ORIGINAL, 0.6).backend == BackendId.CLI


def test_all_failed_returns_original():
    winner = arbitrate([failed(BackendId.PILLOW), failed(BackendId.CLI)], ORIGINAL, 0.6)
    assert winner.backend == BackendId.ORIGINAL
    assert winner.output_bytes == ORIGINAL
    assert winner.output_size == 100
    assert winner.duration_ms == 0


def test_empty_attempts_return_original():
    assert arbitrate([], ORIGINAL, 0.9).backend == BackendId.ORIGINAL


def test_guard_triggers_above_high_quality():
    winner = arbitrate([ok(BackendId.PILLOW, 98)], ORIGINAL, 0.9)
    assert winner.backend == BackendId.ORIGINAL


def test_guard_needs_quality_strictly_above_threshold():
    assert arbitrate([ok(BackendId.PILLOW, 99)], ORIGINAL, 0.85).backend == BackendId.PILLOW
    assert arbitrate([ok(BackendId.PILLOW, 99)], ORIGINAL, 0.8).backend == BackendId.PILLOW


def test_guard_allows_real_savings_at_high_quality():
    assert arbitrate([ok(BackendId.PILLOW, 97)], ORIGINAL, 0.95).backend == BackendId.PILLOW


def test_larger_output_still_wins_at_moderate_quality():
    winner = arbitrate([ok(BackendId.PILLOW, 120)], ORIGINAL, 0.6)
    assert winner.backend == BackendId.PILLOW
    assert winner.output_size == 120


def test_best_successful_none_without_successes():
    assert best_successful([failed(BackendId.CLI)]) is None
