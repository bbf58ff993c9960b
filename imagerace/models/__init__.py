"""
Data models for the imagerace package.

Pydantic models for requests, per-backend attempts and caller-facing
results.
"""
from imagerace.models.base import (
    BackendId,
    CompressionMode,
    ContainerType,
    OutputRepresentation
)

from imagerace.models.request import (
    DEFAULT_QUALITY,
    CompressionOptions,
    CompressionRequest,
    ToolConfig
)

from imagerace.models.attempt import (
    ArbitrationResult,
    CompressionAttempt
)

from imagerace.models.results import (
    BackendStats,
    BlobResult,
    CompressionStats,
    CompressResultItem,
    FileResult,
    MultipleCompressResults
)

__all__ = [
    # Enumerations
    'BackendId',
    'CompressionMode',
    'ContainerType',
    'OutputRepresentation',

    # Requests
    'DEFAULT_QUALITY',
    'CompressionOptions',
    'CompressionRequest',
    'ToolConfig',

    # Attempts
    'ArbitrationResult',
    'CompressionAttempt',

    # Results
    'BackendStats',
    'BlobResult',
    'CompressionStats',
    'CompressResultItem',
    'FileResult',
    'MultipleCompressResults'
]
