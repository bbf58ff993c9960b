"""
External optimizer backend.

Runs the classic command line optimizers through temporary files:
- pngquant for PNG (lossy palette quantization)
- jpegtran for JPEG (lossless Huffman optimization)
- gifsicle for GIF
- cwebp for WebP
"""
import os
import shutil
import asyncio
import logging
import subprocess
from typing import List, Optional

from imagerace.backends.base import Backend
from imagerace.exceptions import BackendCompressionFailedError, BackendUnavailableError
from imagerace.models import BackendId, CompressionMode, CompressionOptions, ContainerType
from imagerace.settings import Settings
from imagerace.utils.file_handling import get_temp_filepath, read_file, temp_workspace, write_temp_file

# Set up logging
logger = logging.getLogger(__name__)

GIF_MIN_COLORS = 16
GIF_MAX_COLORS = 256

_SUFFIXES = {
    ContainerType.PNG: ".png",
    ContainerType.JPEG: ".jpg",
    ContainerType.GIF: ".gif",
    ContainerType.WEBP: ".webp",
}


class CliBackend(Backend):
    """Delegates to pngquant, jpegtran, gifsicle or cwebp depending on the container."""

    name = BackendId.CLI
    supports_metadata = True

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings

    @property
    def settings(self) -> Settings:
        return self._settings if self._settings is not None else Settings.from_env()

    def tool_for(self, container: ContainerType) -> str:
        """Executable used for a container; unknown input is handled as JPEG."""
        settings = self.settings
        return {
            ContainerType.PNG: settings.pngquant_path,
            ContainerType.GIF: settings.gifsicle_path,
            ContainerType.WEBP: settings.cwebp_path,
        }.get(container, settings.jpegtran_path)

    def is_available(self) -> bool:
        settings = self.settings
        tools = [settings.pngquant_path, settings.jpegtran_path, settings.gifsicle_path, settings.cwebp_path]
        return any(shutil.which(tool) for tool in tools)

    async def compress(self, data: bytes, options: CompressionOptions) -> bytes:
        self.validate_input(data)
        return await asyncio.to_thread(self._compress_sync, data, options)

    def build_command(
        self,
        container: ContainerType,
        input_path: str,
        output_path: str,
        options: CompressionOptions
    ) -> List[str]:
        """
        Build the optimizer command line for one container type.

        Args:
            container: Container type of the input
            input_path: File holding the input
            output_path: File the tool writes to
            options: Compression options

        Returns:
            argv list
        """
        tool = self.tool_for(container)
        quality = options.quality_percent
        keep_quality = options.mode == CompressionMode.KEEP_QUALITY

        if container == ContainerType.PNG:
            quality_range = f"{quality}-100" if keep_quality else f"{max(0, quality - 10)}-{quality}"
            command = [tool, "--force", "--speed", "1", "--quality", quality_range, "--output", output_path]
            if not options.preserve_metadata:
                command.append("--strip")
            command.append(input_path)
            return command

        if container == ContainerType.GIF:
            command = [tool, "-O3"]
            if not keep_quality:
                colors = min(GIF_MAX_COLORS, max(GIF_MIN_COLORS, round(quality * 2.56)))
                command += ["--colors", str(colors)]
            command += ["-o", output_path, input_path]
            return command

        if container == ContainerType.WEBP:
            metadata = "all" if options.preserve_metadata else "none"
            return [tool, "-q", str(quality), "-m", "6", "-metadata", metadata, input_path, "-o", output_path]

        copy = "all" if options.preserve_metadata else "none"
        return [tool, "-copy", copy, "-optimize", "-progressive", "-outfile", output_path, input_path]

    def _compress_sync(self, data: bytes, options: CompressionOptions) -> bytes:
        # Imported here to avoid circular imports
        from imagerace.core.signature import classify, selection_type

        container = selection_type(classify(data))
        suffix = _SUFFIXES[container]
        timeout = self.settings.tool_timeout

        with temp_workspace() as temp_dir:
            input_path = write_temp_file(temp_dir, data, suffix)
            output_path = get_temp_filepath(temp_dir, "output", suffix)
            command = self.build_command(container, input_path, output_path, options)
            logger.debug(f"Running {' '.join(command)}")

            try:
                subprocess.run(command, check=True, capture_output=True, timeout=timeout)
            except FileNotFoundError:
                raise BackendUnavailableError(f"{command[0]} not installed")
            except subprocess.CalledProcessError as e:
                stderr = e.stderr.decode("utf-8", errors="replace").strip()
                raise BackendCompressionFailedError(
                    f"{os.path.basename(command[0])} failed with exit code {e.returncode}: {stderr}"
                )
            except subprocess.TimeoutExpired:
                raise BackendCompressionFailedError(
                    f"{os.path.basename(command[0])} timed out after {timeout} seconds"
                )

            if not os.path.exists(output_path):
                raise BackendCompressionFailedError(f"{os.path.basename(command[0])} produced no output")
            output = read_file(output_path)

        logger.debug(f"{os.path.basename(command[0])} produced {len(output)} bytes from {len(data)}")
        return self.keep_if_smaller(data, output)
