"""
Utilities for measuring compression performance and image quality.
"""
import io
import time
import logging
import numpy as np
import psutil
from PIL import Image, UnidentifiedImageError
from typing import Tuple, Optional, Dict
from skimage.metrics import peak_signal_noise_ratio, structural_similarity

# Set up logging
logger = logging.getLogger(__name__)


def get_cpu_mem() -> Dict[str, float]:
    """
    Get current CPU and memory usage.

    Returns:
        Dictionary with CPU and memory usage percentages
    """
    return {
        "cpu_usage": psutil.cpu_percent(interval=None),
        "memory_usage": psutil.virtual_memory().percent
    }


def compression_ratio(original_size: int, compressed_size: int) -> float:
    """
    Percentage of bytes saved by compression.

    Args:
        original_size: Size of the original input in bytes
        compressed_size: Size of the compressed output in bytes

    Returns:
        Saved percentage, rounded to 2 decimals (negative if the output grew)
    """
    if original_size <= 0:
        return 0.0
    return round((original_size - compressed_size) / original_size * 100, 2)


def _decode_rgb(data: bytes) -> Optional[np.ndarray]:
    try:
        with Image.open(io.BytesIO(data)) as img:
            return np.array(img.convert("RGB"))
    except (UnidentifiedImageError, OSError) as e:
        logger.debug(f"Could not decode image for quality metrics: {e}")
        return None


def calculate_image_metrics(
    original: bytes,
    compressed: bytes
) -> Tuple[Optional[float], Optional[float]]:
    """
    Calculate PSNR and SSIM between an encoded original and its compressed form.

    Args:
        original: Encoded original image
        compressed: Encoded compressed image

    Returns:
        Tuple of (PSNR, SSIM), rounded to 2 and 4 decimal places respectively.
        Returns (None, None) if either image cannot be decoded.
    """
    original_img = _decode_rgb(original)
    compressed_img = _decode_rgb(compressed)
    if original_img is None or compressed_img is None:
        return None, None

    # Backends may have resized the image
    if original_img.shape != compressed_img.shape:
        logger.info(
            f"Image shapes don't match: original {original_img.shape} vs compressed {compressed_img.shape}"
        )
        resized = Image.fromarray(compressed_img).resize(
            (original_img.shape[1], original_img.shape[0]), Image.Resampling.LANCZOS
        )
        compressed_img = np.array(resized)

    mse = np.mean(np.square(original_img.astype(np.float32) - compressed_img.astype(np.float32)))
    if mse < 1e-10:
        psnr = 100.0
    else:
        psnr = peak_signal_noise_ratio(original_img, compressed_img, data_range=255)

    # SSIM needs a window of at least 7 pixels per side
    if min(original_img.shape[0], original_img.shape[1]) < 7:
        ssim = 1.0 if mse < 1e-10 else None
    else:
        ssim = structural_similarity(original_img, compressed_img, data_range=255, channel_axis=2)

    return round(float(psnr), 2), (round(float(ssim), 4) if ssim is not None else None)


class PerformanceTimer:
    """
    Context manager for measuring execution time.

    Example:
        with PerformanceTimer() as timer:
            # Code to measure
        duration = timer.duration_ms
    """

    def __init__(self):
        self.start_time = None
        self.execution_time = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.execution_time = time.perf_counter() - self.start_time
        return False  # Don't suppress exceptions

    @property
    def duration_ms(self) -> int:
        """Measured time in whole milliseconds"""
        return int(round(self.execution_time * 1000))
