"""
Compression backends.

Each backend adapts one engine to the common Backend contract:
- pillow: Pillow re-encoding with resize
- cli: pngquant, jpegtran, gifsicle and cwebp
- mozjpeg: Pillow + MozJPEG lossless optimization
- tinify: the Tinify web service
"""
from typing import Optional

from imagerace.backends.base import (
    ADAPTER_KEEP_RATIO,
    Backend,
    BackendRegistry
)
from imagerace.backends.pillow import PillowBackend
from imagerace.backends.cli import CliBackend
from imagerace.backends.mozjpeg import MozjpegBackend
from imagerace.backends.tinypng import TinifyBackend
from imagerace.settings import Settings


def default_registry(settings: Optional[Settings] = None) -> BackendRegistry:
    """
    Build a registry holding the stock backends.

    Args:
        settings: Settings override (defaults to the environment at call time)

    Returns:
        A fresh BackendRegistry
    """
    return BackendRegistry([
        PillowBackend(),
        CliBackend(settings),
        MozjpegBackend(),
        TinifyBackend(settings),
    ])


__all__ = [
    'ADAPTER_KEEP_RATIO',
    'Backend',
    'BackendRegistry',
    'PillowBackend',
    'CliBackend',
    'MozjpegBackend',
    'TinifyBackend',
    'default_registry'
]
