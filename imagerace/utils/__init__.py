"""
Utility functions for the imagerace package.
"""
import logging
import sys
from typing import Optional

from imagerace.settings import Settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger for applications embedding imagerace.

    Args:
        level: Log level name; defaults to the LOG_LEVEL environment variable
    """
    level_name = (level or Settings.from_env().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stdout
    )


from imagerace.utils.metrics import (
    get_cpu_mem,
    compression_ratio,
    calculate_image_metrics,
    PerformanceTimer
)

from imagerace.utils.file_handling import (
    get_temp_filepath,
    temp_workspace,
    write_temp_file,
    read_file
)

__all__ = [
    'LOG_FORMAT',
    'configure_logging',

    # Metrics utilities
    'get_cpu_mem',
    'compression_ratio',
    'calculate_image_metrics',
    'PerformanceTimer',

    # File handling utilities
    'get_temp_filepath',
    'temp_workspace',
    'write_temp_file',
    'read_file'
]
