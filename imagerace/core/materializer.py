"""
Conversion of result bytes into the caller's requested representation.
"""
import base64
from typing import Optional, Union

from imagerace.models import BlobResult, FileResult, OutputRepresentation

DEFAULT_MIME_TYPE = "image/png"
DEFAULT_FILE_NAME = "compressed"

MIME_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "bmp": "image/bmp",
    "tiff": "image/tiff",
    "svg": "image/svg+xml",
}


def mime_type_from_file_name(file_name: Optional[str]) -> Optional[str]:
    """
    Infer a MIME type from a file name's extension.

    Returns:
        MIME type, or None for a missing name or unknown extension
    """
    if not file_name or "." not in file_name:
        return None
    extension = file_name.lower().rsplit(".", 1)[-1]
    return MIME_TYPES.get(extension)


def materialize(
    data: bytes,
    representation: Union[OutputRepresentation, str] = OutputRepresentation.BYTES,
    file_name: Optional[str] = None
) -> Union[bytes, str, BlobResult, FileResult]:
    """
    Convert bytes to the requested representation.

    Args:
        data: Result bytes (may be empty)
        representation: bytes, base64, blob or file
        file_name: Name hint for MIME inference and the file variant

    Returns:
        bytes, base64 text, BlobResult or FileResult
    """
    representation = OutputRepresentation(representation)
    data = bytes(data)

    if representation == OutputRepresentation.BYTES:
        return data
    if representation == OutputRepresentation.BASE64:
        return base64.b64encode(data).decode("ascii")

    mime_type = mime_type_from_file_name(file_name) or DEFAULT_MIME_TYPE
    if representation == OutputRepresentation.FILE:
        return FileResult(name=file_name or DEFAULT_FILE_NAME, type=mime_type, size=len(data), data=data)
    return BlobResult(type=mime_type, size=len(data), data=data)
