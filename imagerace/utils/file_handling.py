"""
Utilities for temporary file management around external tools.
"""
import os
import uuid
import logging
import contextlib
import tempfile
from typing import Iterator, Optional

# Set up logging
logger = logging.getLogger(__name__)

TEMP_FILE_PREFIX = "imagerace_"


def get_temp_filepath(temp_dir: str, file_id: Optional[str] = None, suffix: str = "") -> str:
    """
    Generate a path for a temporary file.

    Args:
        temp_dir: Directory the file lives in
        file_id: Optional file ID to use (generates a new UUID if not provided)
        suffix: Optional file suffix/extension

    Returns:
        Absolute path to a temporary file
    """
    if file_id is None:
        file_id = str(uuid.uuid4())

    return os.path.join(temp_dir, f"{file_id}{suffix}")


@contextlib.contextmanager
def temp_workspace() -> Iterator[str]:
    """
    Context manager yielding a private scratch directory, removed on exit.

    Yields:
        Path to the directory
    """
    with tempfile.TemporaryDirectory(prefix=TEMP_FILE_PREFIX) as temp_dir:
        logger.debug(f"Created scratch directory {temp_dir}")
        yield temp_dir


def write_temp_file(temp_dir: str, data: bytes, suffix: str = "") -> str:
    """
    Write bytes to a fresh file inside temp_dir.

    Args:
        temp_dir: Scratch directory
        data: Content to write
        suffix: File extension

    Returns:
        Path of the written file
    """
    path = get_temp_filepath(temp_dir, suffix=suffix)
    with open(path, "wb") as f:
        f.write(data)
    return path


def read_file(path: str) -> bytes:
    """Read a whole file as bytes."""
    with open(path, "rb") as f:
        return f.read()
