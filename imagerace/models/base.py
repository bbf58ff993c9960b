"""
Enumerations shared across the imagerace data model.
"""
from enum import Enum


class ContainerType(str, Enum):
    """Image container family inferred from the leading bytes"""
    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"
    GIF = "gif"
    UNKNOWN = "unknown"


class BackendId(str, Enum):
    """Identifier of a compression backend"""
    PILLOW = "pillow"
    CLI = "cli"
    MOZJPEG = "mozjpeg"
    TINIFY = "tinify"
    # Synthetic sentinel: no transformation applied
    ORIGINAL = "original"


class CompressionMode(str, Enum):
    """Trade-off hint passed through to backends"""
    KEEP_SIZE = "keepSize"
    KEEP_QUALITY = "keepQuality"


class OutputRepresentation(str, Enum):
    """Representation of the value handed back to the caller"""
    BYTES = "bytes"
    BASE64 = "base64"
    BLOB = "blob"
    FILE = "file"
