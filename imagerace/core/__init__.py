"""
Core orchestration for the imagerace package.

- signature: container detection from magic bytes
- selector: container type -> candidate backends
- orchestrator: concurrent race over the candidates
- arbitration: winner selection and the not-worth-it guard
- materializer: output representations
"""
from imagerace.core.signature import (
    classify,
    selection_type,
    mime_type_for_container
)

from imagerace.core.selector import (
    TOOL_COLLECTIONS,
    candidate_backends,
    select_backends
)

from imagerace.core.arbitration import (
    NOT_WORTH_IT_RATIO,
    HIGH_QUALITY_THRESHOLD,
    arbitrate,
    best_successful
)

from imagerace.core.materializer import (
    DEFAULT_FILE_NAME,
    DEFAULT_MIME_TYPE,
    materialize,
    mime_type_from_file_name
)

from imagerace.core.orchestrator import (
    EventSink,
    noop_sink,
    race,
    race_and_arbitrate
)

__all__ = [
    # Signature sniffing
    'classify',
    'selection_type',
    'mime_type_for_container',

    # Backend selection
    'TOOL_COLLECTIONS',
    'candidate_backends',
    'select_backends',

    # Arbitration
    'NOT_WORTH_IT_RATIO',
    'HIGH_QUALITY_THRESHOLD',
    'arbitrate',
    'best_successful',

    # Materialization
    'DEFAULT_FILE_NAME',
    'DEFAULT_MIME_TYPE',
    'materialize',
    'mime_type_from_file_name',

    # Orchestration
    'EventSink',
    'noop_sink',
    'race',
    'race_and_arbitrate'
]
