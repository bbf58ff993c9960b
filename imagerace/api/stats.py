"""
The compress_with_stats entry point.
"""
import asyncio
import logging
from typing import Any, Optional

from imagerace.api.compressor import run_request
from imagerace.api.inputs import build_request
from imagerace.backends import BackendRegistry
from imagerace.core import EventSink, classify, mime_type_for_container
from imagerace.models import BackendStats, BlobResult, CompressionStats
from imagerace.utils.metrics import calculate_image_metrics, compression_ratio, get_cpu_mem

# Set up logging
logger = logging.getLogger(__name__)


async def compress_with_stats(
    source: Any,
    quality_or_options: Any = None,
    *,
    registry: Optional[BackendRegistry] = None,
    on_event: Optional[EventSink] = None,
    measure_quality: bool = False,
    **overrides: Any
) -> CompressionStats:
    """
    Compress an image and report statistics for every backend.

    Args:
        source: bytes, a path, or an object exposing read_all_bytes()
        quality_or_options: CompressionOptions, a mapping, or a legacy quality number
        registry: Backend registry (defaults to the stock backends)
        on_event: Observability sink
        measure_quality: Also compute PSNR and SSIM of the winner
        **overrides: Option fields

    Returns:
        CompressionStats for the request

    Raises:
        InvalidInputError: If the input or options are invalid
        NoCapableBackendError: If no backend can preserve metadata for this input
    """
    request = await build_request(source, quality_or_options, None, overrides)
    result = await run_request(request, registry=registry, on_event=on_event)

    original_size = request.original_size
    winner = result.winning_attempt

    psnr, ssim = None, None
    if measure_quality:
        psnr, ssim = await asyncio.to_thread(calculate_image_metrics, request.data, winner.output_bytes)
        logger.info(f"Quality of {winner.backend.value} result: PSNR {psnr}, SSIM {ssim}")

    cpu_mem = get_cpu_mem()

    return CompressionStats(
        best_backend=winner.backend,
        compressed_file=BlobResult(
            type=mime_type_for_container(classify(winner.output_bytes)),
            size=winner.output_size,
            data=winner.output_bytes,
        ),
        original_size=original_size,
        compressed_size=winner.output_size,
        compression_ratio=compression_ratio(original_size, winner.output_size),
        total_duration_ms=result.total_duration_ms,
        per_backend=[
            BackendStats(
                backend=attempt.backend,
                size=attempt.output_size,
                duration_ms=attempt.duration_ms,
                compression_ratio=compression_ratio(original_size, attempt.output_size),
                succeeded=attempt.succeeded,
                error_message=attempt.error_message,
            )
            for attempt in result.all_attempts
        ],
        cpu_usage=cpu_mem["cpu_usage"],
        memory_usage=cpu_mem["memory_usage"],
        psnr=psnr,
        ssim=ssim,
    )
