"""
Pillow backend: resize and re-encode in the input's own format.
"""
import io
import asyncio
import logging
from typing import Any, Dict, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from imagerace.backends.base import Backend
from imagerace.exceptions import BackendCompressionFailedError
from imagerace.models import BackendId, CompressionMode, CompressionOptions

# Set up logging
logger = logging.getLogger(__name__)

PNG_COMPRESS_LEVEL = 9
WEBP_METHOD = 6


def fit_inside(
    size: Tuple[int, int],
    width: Optional[int],
    height: Optional[int]
) -> Tuple[int, int]:
    """
    Scale size down to fit a bounding box, keeping the aspect ratio.

    Args:
        size: Current (width, height)
        width: Box width, or None for unbounded
        height: Box height, or None for unbounded

    Returns:
        New (width, height); never larger than size
    """
    current_width, current_height = size
    scale = min(
        width / current_width if width else 1.0,
        height / current_height if height else 1.0,
        1.0,
    )
    if scale >= 1.0:
        return size
    return max(1, round(current_width * scale)), max(1, round(current_height * scale))


def resize_for_options(img: Image.Image, options: CompressionOptions) -> Image.Image:
    """
    Apply the requested resize: target box first, else max bounds.

    Args:
        img: Decoded image
        options: Compression options

    Returns:
        Resized image, or img when no resize applies
    """
    if options.target_width or options.target_height:
        new_size = fit_inside(img.size, options.target_width, options.target_height)
    elif options.max_width or options.max_height:
        new_size = fit_inside(img.size, options.max_width, options.max_height)
    else:
        return img

    if new_size == img.size:
        return img
    logger.debug(f"Resizing {img.size[0]}x{img.size[1]} -> {new_size[0]}x{new_size[1]}")
    return img.resize(new_size, Image.Resampling.LANCZOS)


def to_rgb(img: Image.Image) -> Image.Image:
    """Flatten onto a white background for formats without alpha."""
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        rgba = img.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.split()[3])
        return background
    if img.mode not in ("RGB", "L"):
        return img.convert("RGB")
    return img


def metadata_params(source: Image.Image, options: CompressionOptions) -> Dict[str, Any]:
    """
    Encoder keyword arguments carrying EXIF and ICC data across re-encoding.

    Args:
        source: Decoded input image
        options: Compression options

    Returns:
        Keyword arguments for Image.save
    """
    if not options.preserve_metadata:
        return {}
    params = {}
    exif = source.info.get("exif")
    if exif:
        params["exif"] = exif
    icc_profile = source.info.get("icc_profile")
    if icc_profile:
        params["icc_profile"] = icc_profile
    return params


class PillowBackend(Backend):
    """Re-encodes JPEG, PNG and WebP with Pillow; other formats become JPEG."""

    name = BackendId.PILLOW
    supports_metadata = True

    async def compress(self, data: bytes, options: CompressionOptions) -> bytes:
        self.validate_input(data)
        # Pillow work is CPU bound, keep it off the event loop
        return await asyncio.to_thread(self._compress_sync, data, options)

    def _compress_sync(self, data: bytes, options: CompressionOptions) -> bytes:
        try:
            with Image.open(io.BytesIO(data)) as source:
                source_format = (source.format or "").upper()

                # Animated images are passed through untouched
                if source_format == "GIF" or getattr(source, "is_animated", False):
                    logger.debug(f"Pillow leaves {source_format or 'animated'} input unchanged")
                    return data

                source.load()
                extra = metadata_params(source, options)
                img = resize_for_options(source, options)
                output = self._encode(img, source_format, options, extra)
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise BackendCompressionFailedError(f"Pillow compression failed: {e}") from e

        logger.debug(f"Pillow produced {len(output)} bytes from {len(data)}")
        return self.keep_if_smaller(data, output)

    def _encode(
        self,
        img: Image.Image,
        source_format: str,
        options: CompressionOptions,
        extra: Dict[str, Any]
    ) -> bytes:
        buffer = io.BytesIO()
        keep_quality = options.mode == CompressionMode.KEEP_QUALITY

        if source_format == "PNG":
            if not keep_quality:
                colors = max(2, min(256, round(256 * options.quality)))
                if img.mode not in ("RGB", "RGBA", "L"):
                    img = img.convert("RGBA")
                img = img.quantize(colors=colors)
            img.save(buffer, format="PNG", optimize=True, compress_level=PNG_COMPRESS_LEVEL, **extra)
        elif source_format == "WEBP":
            if img.mode not in ("RGB", "RGBA"):
                img = img.convert("RGBA")
            img.save(
                buffer,
                format="WEBP",
                quality=options.quality_percent,
                method=WEBP_METHOD,
                **extra,
            )
        else:
            # JPEG, and the default for anything else
            img = to_rgb(img)
            img.save(
                buffer,
                format="JPEG",
                quality=options.quality_percent,
                optimize=True,
                progressive=True,
                subsampling=0 if keep_quality else 2,
                **extra,
            )
        return buffer.getvalue()
