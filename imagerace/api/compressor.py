"""
The compress entry point.
"""
import logging
from typing import Any, Optional, Union

from imagerace.api.inputs import build_request
from imagerace.backends import BackendRegistry, default_registry
from imagerace.core import (
    EventSink,
    classify,
    materialize,
    race_and_arbitrate,
    select_backends
)
from imagerace.models import (
    ArbitrationResult,
    BlobResult,
    CompressionRequest,
    CompressResultItem,
    FileResult,
    MultipleCompressResults
)
from imagerace.utils.metrics import compression_ratio

# Set up logging
logger = logging.getLogger(__name__)


async def run_request(
    request: CompressionRequest,
    registry: Optional[BackendRegistry] = None,
    on_event: Optional[EventSink] = None
) -> ArbitrationResult:
    """
    Sniff, select, race and arbitrate for a canonical request.

    Raises:
        NoCapableBackendError: If no backend can serve the request
    """
    registry = registry if registry is not None else default_registry()
    container = classify(request.data)
    backends = select_backends(container, request.options.preserve_metadata, registry)
    logger.debug(f"Detected {container.value} input, dispatching {[b.value for b in backends]}")
    return await race_and_arbitrate(
        request.data, request.options, backends, registry=registry, on_event=on_event
    )


def build_multiple_results(
    result: ArbitrationResult,
    request: CompressionRequest
) -> MultipleCompressResults:
    """Materialize every attempt and the winner."""
    representation = request.options.output_representation
    original_size = request.original_size

    all_results = [
        CompressResultItem(
            backend=attempt.backend,
            result=materialize(attempt.output_bytes, representation, request.file_name),
            original_size=original_size,
            compressed_size=attempt.output_size,
            compression_ratio=compression_ratio(original_size, attempt.output_size),
            duration_ms=attempt.duration_ms,
            succeeded=attempt.succeeded,
            error_message=attempt.error_message,
        )
        for attempt in result.all_attempts
    ]

    return MultipleCompressResults(
        best_result=materialize(result.winning_attempt.output_bytes, representation, request.file_name),
        best_backend=result.winning_attempt.backend,
        all_results=all_results,
        total_duration_ms=result.total_duration_ms,
    )


async def compress(
    source: Any,
    quality_or_options: Any = None,
    representation: Optional[Any] = None,
    *,
    registry: Optional[BackendRegistry] = None,
    on_event: Optional[EventSink] = None,
    **overrides: Any
) -> Union[bytes, str, BlobResult, FileResult, MultipleCompressResults]:
    """
    Compress an image with every suitable backend and return the best result.

    Args:
        source: bytes, a path, or an object exposing read_all_bytes()
        quality_or_options: CompressionOptions, a mapping, or a legacy quality number
        representation: Legacy positional output representation
        registry: Backend registry (defaults to the stock backends)
        on_event: Observability sink
        **overrides: Option fields, e.g. quality=0.8, return_all_attempts=True

    Returns:
        The winning output in the requested representation, or
        MultipleCompressResults when return_all_attempts is set

    Raises:
        InvalidInputError: If the input or options are invalid
        NoCapableBackendError: If no backend can preserve metadata for this input
    """
    request = await build_request(source, quality_or_options, representation, overrides)
    result = await run_request(request, registry=registry, on_event=on_event)

    if request.options.return_all_attempts:
        return build_multiple_results(result, request)

    return materialize(
        result.winning_attempt.output_bytes,
        request.options.output_representation,
        request.file_name,
    )
