"""
imagerace: pick the smallest output among several image compression backends.

Every suitable backend compresses the same input concurrently; the
smallest successful result wins, and the original bytes are kept when
compression does not pay off.

Backends:
- Pillow re-encoding
- pngquant / jpegtran / gifsicle / cwebp
- MozJPEG lossless optimization
- Tinify web service
"""
from imagerace.api import compress, compress_with_stats
from imagerace.exceptions import (
    ImageRaceError,
    InvalidInputError,
    BackendUnavailableError,
    BackendCompressionFailedError,
    MissingCredentialError,
    NoCapableBackendError
)
from imagerace.models import (
    BackendId,
    BlobResult,
    CompressionMode,
    CompressionOptions,
    CompressionStats,
    ContainerType,
    FileResult,
    MultipleCompressResults,
    OutputRepresentation,
    ToolConfig
)

__version__ = "1.0.0"

__all__ = [
    'compress',
    'compress_with_stats',

    # Errors
    'ImageRaceError',
    'InvalidInputError',
    'BackendUnavailableError',
    'BackendCompressionFailedError',
    'MissingCredentialError',
    'NoCapableBackendError',

    # Models
    'BackendId',
    'BlobResult',
    'CompressionMode',
    'CompressionOptions',
    'CompressionStats',
    'ContainerType',
    'FileResult',
    'MultipleCompressResults',
    'OutputRepresentation',
    'ToolConfig'
]
