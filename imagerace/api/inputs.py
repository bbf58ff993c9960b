"""
Boundary adaptation: input normalization and canonical request building.

Every public entry point funnels its arguments through build_request so
the orchestrator only ever sees a CompressionRequest, whichever call form
was used:
- options form: compress(data, CompressionOptions(...)) or a mapping
- keyword form: compress(data, quality=0.8, output_representation="base64")
- legacy positional form: compress(data, 0.8, "base64")
"""
import os
import asyncio
import inspect
import logging
from numbers import Real
from typing import Any, Mapping, Optional, Tuple

from pydantic import ValidationError

from imagerace.exceptions import InvalidInputError
from imagerace.models import (
    CompressionMode,
    CompressionOptions,
    CompressionRequest,
    OutputRepresentation
)
from imagerace.utils.file_handling import read_file

# Set up logging
logger = logging.getLogger(__name__)


async def read_input(source: Any) -> Tuple[bytes, Optional[str]]:
    """
    Normalize any supported input to raw bytes with a single read.

    Args:
        source: bytes-like object, path, or object exposing read_all_bytes()

    Returns:
        Tuple of (data, file_name)

    Raises:
        InvalidInputError: If the input is unsupported, unreadable or empty
    """
    file_name = None

    if isinstance(source, (bytes, bytearray, memoryview)):
        data = bytes(source)
    elif isinstance(source, (str, os.PathLike)):
        path = os.fspath(source)
        try:
            data = await asyncio.to_thread(read_file, path)
        except OSError as e:
            raise InvalidInputError(f"Could not read input file {path}: {e}") from e
        file_name = os.path.basename(path)
    elif hasattr(source, "read_all_bytes"):
        data = source.read_all_bytes()
        if inspect.isawaitable(data):
            data = await data
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise InvalidInputError(
                f"read_all_bytes() returned {type(data).__name__} instead of bytes"
            )
        data = bytes(data)
        file_name = getattr(source, "name", None)
    else:
        raise InvalidInputError(f"Unsupported input type: {type(source).__name__}")

    if len(data) == 0:
        raise InvalidInputError("Input is empty")
    return data, file_name


def build_options(
    quality_or_options: Any = None,
    representation: Optional[Any] = None,
    overrides: Optional[Mapping[str, Any]] = None
) -> CompressionOptions:
    """
    Translate any supported call form into CompressionOptions.

    Args:
        quality_or_options: CompressionOptions, a mapping of option fields,
            a legacy quality number, or None
        representation: Legacy positional output representation
        overrides: Keyword option overrides

    Returns:
        Validated options

    Raises:
        InvalidInputError: If the options are invalid
    """
    if isinstance(quality_or_options, CompressionOptions):
        fields = quality_or_options.model_dump()
    elif isinstance(quality_or_options, Mapping):
        # Normalize camelCase keys so overrides replace them instead of colliding
        try:
            fields = CompressionOptions.model_validate(dict(quality_or_options)).model_dump()
        except ValidationError as e:
            raise InvalidInputError(f"Invalid compression options: {e}") from e
    elif quality_or_options is None:
        fields = {}
    elif isinstance(quality_or_options, Real) and not isinstance(quality_or_options, bool):
        # Legacy positional form
        fields = {"quality": float(quality_or_options), "mode": CompressionMode.KEEP_SIZE}
    else:
        raise InvalidInputError(
            f"Expected options or a quality number, got {type(quality_or_options).__name__}"
        )

    if representation is not None:
        fields["output_representation"] = representation
    if overrides:
        fields.update(overrides)

    try:
        return CompressionOptions.model_validate(fields)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid compression options: {e}") from e


async def build_request(
    source: Any,
    quality_or_options: Any = None,
    representation: Optional[Any] = None,
    overrides: Optional[Mapping[str, Any]] = None
) -> CompressionRequest:
    """
    Build the canonical request for one call.

    Options are validated before the input is read so a bad call never
    touches the input.

    Returns:
        CompressionRequest
    """
    options = build_options(quality_or_options, representation, overrides)
    data, file_name = await read_input(source)
    logger.debug(
        f"Compression request: {len(data)} bytes, quality {options.quality}, "
        f"mode {options.mode.value}, output {OutputRepresentation(options.output_representation).value}"
    )
    return CompressionRequest(data=data, options=options, file_name=file_name)
