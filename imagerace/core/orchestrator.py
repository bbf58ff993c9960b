"""
Concurrent dispatch of every candidate backend against one input.

All backends run at once and every one of them settles: the race is
"all finish, best wins", never "first finishes wins". A failing backend is
recorded as a failed attempt carrying the original bytes and never
disturbs its siblings.
"""
import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from imagerace.backends import BackendRegistry, default_registry
from imagerace.core.arbitration import arbitrate, best_successful
from imagerace.exceptions import (
    BackendCompressionFailedError,
    ImageRaceError,
    InvalidInputError,
    NoCapableBackendError
)
from imagerace.models import (
    ArbitrationResult,
    BackendId,
    CompressionAttempt,
    CompressionOptions
)
from imagerace.utils.metrics import PerformanceTimer

# Set up logging
logger = logging.getLogger(__name__)

EventSink = Callable[[str, Dict[str, Any]], None]


def noop_sink(event: str, payload: Dict[str, Any]) -> None:
    """Default observability sink: discards every event."""
    return None


def _safe_sink(on_event: Optional[EventSink]) -> EventSink:
    """Wrap a caller sink so a failing sink is logged and never aborts the race."""
    if on_event is None:
        return noop_sink

    def emit(event: str, payload: Dict[str, Any]) -> None:
        try:
            on_event(event, payload)
        except Exception as e:
            logger.error(f"Event sink failed on {event}: {str(e)}")

    return emit


def _error_message(error: BaseException) -> str:
    return str(error) or type(error).__name__


async def _run_attempt(
    backend_id: BackendId,
    data: bytes,
    options: CompressionOptions,
    registry: BackendRegistry
) -> CompressionAttempt:
    """Invoke one backend and record its outcome; never raises for backend errors."""
    error: Optional[Exception] = None
    output = b''

    with PerformanceTimer() as timer:
        try:
            backend = registry.get(backend_id)
            output = await backend.compress(data, options)
            if not isinstance(output, (bytes, bytearray)):
                raise BackendCompressionFailedError(
                    f"Backend {backend_id.value} returned {type(output).__name__} instead of bytes"
                )
            if len(output) == 0:
                raise BackendCompressionFailedError(f"Backend {backend_id.value} returned empty output")
        except ImageRaceError as e:
            error = e
        except Exception as e:
            logger.error(f"Unexpected failure in backend {backend_id.value}: {str(e)}")
            error = e

    if error is not None:
        logger.debug(f"Backend {backend_id.value} failed after {timer.duration_ms}ms: {error}")
        return CompressionAttempt.failure(backend_id, data, _error_message(error), timer.duration_ms)
    return CompressionAttempt.success(backend_id, bytes(output), timer.duration_ms)


async def race(
    data: bytes,
    options: CompressionOptions,
    backends: Iterable[BackendId],
    registry: Optional[BackendRegistry] = None,
    on_event: Optional[EventSink] = None
) -> List[CompressionAttempt]:
    """
    Run every backend concurrently against the same input.

    Args:
        data: Encoded input image
        options: Compression options, passed through to every backend
        backends: Backends to dispatch, in tie-break order
        registry: Registry resolving backend ids (defaults to the stock backends)
        on_event: Observability sink called as on_event(event, payload)

    Returns:
        One attempt per dispatched backend, in dispatch order

    Raises:
        InvalidInputError: If data is empty or not bytes
        NoCapableBackendError: If nothing is left to dispatch
    """
    if not isinstance(data, (bytes, bytearray)) or len(data) == 0:
        raise InvalidInputError("Input buffer must be a non-empty bytes object")
    data = bytes(data)
    registry = registry if registry is not None else default_registry()
    sink = _safe_sink(on_event)
    backends = list(backends)

    if options.preserve_metadata:
        capable = registry.metadata_capable(backends)
        if len(capable) != len(backends):
            sink("backends.filtered", {
                "requested": [b.value for b in backends],
                "dispatched": [b.value for b in capable],
            })
        backends = capable

    if not backends:
        raise NoCapableBackendError(
            "No capable backend available for this input. "
            "Disable preserve_metadata or use a different file format."
        )

    sink("race.started", {"backends": [b.value for b in backends], "original_size": len(data)})

    attempts = await asyncio.gather(
        *(_run_attempt(backend_id, data, options, registry) for backend_id in backends)
    )

    for attempt in attempts:
        sink("attempt.finished", {
            "backend": attempt.backend.value,
            "succeeded": attempt.succeeded,
            "size": attempt.output_size,
            "duration_ms": attempt.duration_ms,
            "error": attempt.error_message,
        })
    return list(attempts)


def _log_summary(result: ArbitrationResult, original_size: int) -> None:
    winner = result.winning_attempt
    reduction = (original_size - winner.output_size) / original_size * 100
    logger.info(
        f"Best compression result: {winner.backend.value} ({winner.output_size} bytes, "
        f"{reduction:.1f}% reduction) - Total time: {result.total_duration_ms}ms"
    )

    for attempt in result.all_attempts:
        if not attempt.succeeded:
            continue
        saved = (original_size - attempt.output_size) / original_size * 100
        seconds = max(attempt.duration_ms, 1) / 1000
        speed = original_size / (1024 * 1024) / seconds
        logger.debug(
            f"{attempt.backend.value:>8}: {attempt.output_size} bytes, {saved:.1f}% saved, "
            f"{attempt.duration_ms}ms, {speed:.2f} MB/s"
        )


async def race_and_arbitrate(
    data: bytes,
    options: CompressionOptions,
    backends: Iterable[BackendId],
    registry: Optional[BackendRegistry] = None,
    on_event: Optional[EventSink] = None
) -> ArbitrationResult:
    """
    Race the backends and pick the winner.

    Args:
        data: Encoded input image
        options: Compression options
        backends: Backends to dispatch, in tie-break order
        registry: Registry resolving backend ids
        on_event: Observability sink

    Returns:
        ArbitrationResult with the winner, every attempt and the total duration
    """
    sink = _safe_sink(on_event)

    with PerformanceTimer() as timer:
        attempts = await race(data, options, backends, registry=registry, on_event=sink)
        winner = arbitrate(attempts, bytes(data), options.quality)

    if best_successful(attempts) is None:
        logger.warning("All compression attempts failed, returning original buffer")
    elif winner.backend == BackendId.ORIGINAL:
        best = best_successful(attempts)
        logger.info(
            f"Best compression ({best.backend.value}) size: {best.output_size}, "
            f"original: {len(data)}, using original"
        )
        sink("arbitration.original_selected", {
            "best_backend": best.backend.value,
            "best_size": best.output_size,
            "original_size": len(data),
            "quality": options.quality,
        })

    result = ArbitrationResult(
        winning_attempt=winner,
        all_attempts=attempts,
        total_duration_ms=timer.duration_ms,
    )
    sink("race.finished", {
        "winner": winner.backend.value,
        "size": winner.output_size,
        "total_duration_ms": result.total_duration_ms,
    })
    _log_summary(result, len(data))
    return result
