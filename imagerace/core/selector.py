"""
Maps a container type to the backends that race for it.
"""
import logging
from typing import Dict, List, Optional

from imagerace.exceptions import NoCapableBackendError
from imagerace.models import BackendId, ContainerType
from imagerace.core.signature import selection_type

# Set up logging
logger = logging.getLogger(__name__)

# Candidate order is only a tie-break key; every candidate races
TOOL_COLLECTIONS: Dict[ContainerType, List[BackendId]] = {
    ContainerType.PNG: [BackendId.PILLOW, BackendId.CLI, BackendId.TINIFY],
    ContainerType.GIF: [BackendId.CLI],
    ContainerType.WEBP: [BackendId.PILLOW, BackendId.CLI, BackendId.TINIFY],
    ContainerType.JPEG: [BackendId.PILLOW, BackendId.CLI, BackendId.MOZJPEG, BackendId.TINIFY],
}


def candidate_backends(
    container: ContainerType,
    collections: Optional[Dict[ContainerType, List[BackendId]]] = None
) -> List[BackendId]:
    """Ordered candidates for a container type, before capability filtering."""
    collections = TOOL_COLLECTIONS if collections is None else collections
    return list(collections.get(selection_type(container), []))


def select_backends(
    container: ContainerType,
    preserve_metadata: bool = False,
    registry=None,
    collections: Optional[Dict[ContainerType, List[BackendId]]] = None
) -> List[BackendId]:
    """
    Select the backends to dispatch for a container type.

    Args:
        container: Detected container type
        preserve_metadata: Keep only backends able to preserve metadata
        registry: BackendRegistry declaring capabilities (defaults to the stock backends)
        collections: Override of the container -> candidates mapping

    Returns:
        Ordered list of backend identifiers

    Raises:
        NoCapableBackendError: If preserve_metadata leaves no candidate
    """
    backends = candidate_backends(container, collections)
    if not preserve_metadata:
        return backends

    if registry is None:
        # Imported here to avoid circular imports
        from imagerace.backends import default_registry
        registry = default_registry()

    capable = registry.metadata_capable(backends)
    if not capable:
        raise NoCapableBackendError(
            f"No metadata-preserving backend available for {container.value} input. "
            "Disable preserve_metadata or use a different file format."
        )
    logger.debug(f"preserve_metadata=True, filtered backends: {[b.value for b in capable]}")
    return capable
