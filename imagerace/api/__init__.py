"""
Public entry points of the imagerace package.
"""
from imagerace.api.inputs import (
    build_options,
    build_request,
    read_input
)

from imagerace.api.compressor import (
    build_multiple_results,
    compress,
    run_request
)

from imagerace.api.stats import compress_with_stats

__all__ = [
    'build_options',
    'build_request',
    'read_input',
    'build_multiple_results',
    'compress',
    'run_request',
    'compress_with_stats'
]
