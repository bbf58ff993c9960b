"""
Container type detection from leading magic bytes.
"""
from imagerace.models import ContainerType

PNG_MAGIC = b'\x89PNG\r\n\x1a\n'
JPEG_MAGIC = b'\xff\xd8'
RIFF_MAGIC = b'RIFF'
WEBP_MAGIC = b'WEBP'
GIF_MAGICS = (b'GIF87a', b'GIF89a')

_CONTAINER_MIME_TYPES = {
    ContainerType.PNG: "image/png",
    ContainerType.JPEG: "image/jpeg",
    ContainerType.WEBP: "image/webp",
    ContainerType.GIF: "image/gif",
}


def classify(data: bytes) -> ContainerType:
    """
    Classify an encoded image by its signature.

    Never raises; buffers too short for a signature are UNKNOWN.

    Args:
        data: Encoded image bytes

    Returns:
        Detected container type
    """
    prefix = bytes(data[:12])

    if prefix[:8] == PNG_MAGIC:
        return ContainerType.PNG
    if prefix[:2] == JPEG_MAGIC:
        return ContainerType.JPEG
    if prefix[:4] == RIFF_MAGIC and prefix[8:12] == WEBP_MAGIC:
        return ContainerType.WEBP
    if prefix[:6] in GIF_MAGICS:
        return ContainerType.GIF
    return ContainerType.UNKNOWN


def selection_type(container: ContainerType) -> ContainerType:
    """Container type used for backend selection; UNKNOWN is handled as JPEG."""
    if container == ContainerType.UNKNOWN:
        return ContainerType.JPEG
    return container


def mime_type_for_container(container: ContainerType) -> str:
    return _CONTAINER_MIME_TYPES[selection_type(container)]
