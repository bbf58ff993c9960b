"""
Tinify backend: the TinyPNG/TinyJPG web service.

Requires an API key supplied through CompressionOptions.tool_configs or the
TINIFY_API_KEY environment variable. A client is created per call so no
key is ever stored in module state.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

from imagerace.backends.base import Backend
from imagerace.exceptions import (
    BackendCompressionFailedError,
    BackendUnavailableError,
    MissingCredentialError
)
from imagerace.models import BackendId, CompressionOptions
from imagerace.settings import Settings

# Optional dependency check
TINIFY_AVAILABLE = False
try:
    import tinify
    TINIFY_AVAILABLE = True
except ImportError:
    pass

# Set up logging
logger = logging.getLogger(__name__)


def resize_command(options: CompressionOptions) -> Optional[Dict[str, Any]]:
    """
    Build the Tinify resize command for the requested dimensions.

    Args:
        options: Compression options

    Returns:
        Resize command dict, or None when no resize was requested
    """
    if not options.wants_resize:
        return None

    command: Dict[str, Any] = {"method": "fit"}
    if options.target_width and options.target_height:
        command["width"] = options.target_width
        command["height"] = options.target_height
    elif options.max_width or options.max_height:
        if options.max_width:
            command["width"] = options.max_width
        if options.max_height:
            command["height"] = options.max_height
    elif options.target_width:
        command["width"] = options.target_width
    elif options.target_height:
        command["height"] = options.target_height

    # "fit" needs both dimensions; "scale" takes exactly one
    if len(command) == 2:
        command["method"] = "scale"
    return command


class TinifyBackend(Backend):
    """Uploads the image to the Tinify API and downloads the result."""

    name = BackendId.TINIFY
    supports_metadata = False

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings

    def is_available(self) -> bool:
        return TINIFY_AVAILABLE

    def resolve_api_key(self, options: CompressionOptions) -> str:
        """
        Find the API key, options first, then the environment.

        Raises:
            MissingCredentialError: If no key is configured
        """
        settings = self._settings if self._settings is not None else Settings.from_env()
        api_key = options.api_key_for(self.name) or settings.tinify_api_key
        if not api_key:
            raise MissingCredentialError(
                "Tinify API key is required. Set TINIFY_API_KEY or provide it in tool_configs."
            )
        return api_key

    async def compress(self, data: bytes, options: CompressionOptions) -> bytes:
        self.validate_input(data)
        api_key = self.resolve_api_key(options)
        if not TINIFY_AVAILABLE:
            raise BackendUnavailableError("Tinify compression requires the tinify package")
        return await asyncio.to_thread(self._compress_sync, data, options, api_key)

    def _compress_sync(self, data: bytes, options: CompressionOptions, api_key: str) -> bytes:
        client = tinify.Client(api_key)
        try:
            response = client.request("post", "/shrink", data)
            location = response.headers.get("location")
            if not location:
                raise BackendCompressionFailedError("Tinify returned no output location")

            commands = {}
            resize = resize_command(options)
            if resize is not None:
                commands["resize"] = resize
            result = client.request("get", location, commands or None)
            output = result.content
        except tinify.Error as e:
            raise BackendCompressionFailedError(f"Tinify compression failed: {e}") from e

        logger.debug(f"Tinify produced {len(output)} bytes from {len(data)}")
        return self.keep_if_smaller(data, bytes(output))
