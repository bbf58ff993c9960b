"""
MozJPEG backend: Pillow JPEG encode followed by MozJPEG lossless optimization.
"""
import io
import asyncio
import logging

from PIL import Image, UnidentifiedImageError

from imagerace.backends.base import Backend
from imagerace.backends.pillow import resize_for_options, to_rgb
from imagerace.exceptions import BackendCompressionFailedError, BackendUnavailableError
from imagerace.models import BackendId, CompressionMode, CompressionOptions

# Optional dependency check
MOZJPEG_AVAILABLE = False
try:
    import mozjpeg_lossless_optimization
    MOZJPEG_AVAILABLE = True
except ImportError:
    pass

# Set up logging
logger = logging.getLogger(__name__)


class MozjpegBackend(Backend):
    """Encodes to baseline JPEG and lets MozJPEG rewrite the entropy coding."""

    name = BackendId.MOZJPEG
    supports_metadata = False

    def is_available(self) -> bool:
        return MOZJPEG_AVAILABLE

    async def compress(self, data: bytes, options: CompressionOptions) -> bytes:
        self.validate_input(data)
        if not MOZJPEG_AVAILABLE:
            raise BackendUnavailableError("MozJPEG encoding requires mozjpeg-lossless-optimization")
        return await asyncio.to_thread(self._compress_sync, data, options)

    def _compress_sync(self, data: bytes, options: CompressionOptions) -> bytes:
        try:
            with Image.open(io.BytesIO(data)) as source:
                source.load()
                img = to_rgb(resize_for_options(source, options))
                buffer = io.BytesIO()
                img.save(
                    buffer,
                    format="JPEG",
                    quality=options.quality_percent,
                    subsampling=0 if options.mode == CompressionMode.KEEP_QUALITY else 2,
                )
            output = mozjpeg_lossless_optimization.optimize(buffer.getvalue())
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise BackendCompressionFailedError(f"MozJPEG compression failed: {e}") from e

        logger.debug(f"MozJPEG produced {len(output)} bytes from {len(data)}")
        return self.keep_if_smaller(data, output)
