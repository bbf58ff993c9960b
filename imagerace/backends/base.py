"""
Backend adapter contract and the capability registry.

Every backend wraps one compression engine behind the same asynchronous
operation, compress(data, options) -> bytes, and declares whether it can
preserve image metadata.
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from imagerace.exceptions import BackendUnavailableError, InvalidInputError
from imagerace.models import BackendId, CompressionOptions

# Set up logging
logger = logging.getLogger(__name__)

# Adapters hand back their input when their own output is at least this
# fraction of it
ADAPTER_KEEP_RATIO = 0.98


class Backend(ABC):
    """Abstract base class for compression backends."""

    name: BackendId
    supports_metadata: bool = False

    @abstractmethod
    async def compress(self, data: bytes, options: CompressionOptions) -> bytes:
        """
        Compress an encoded image.

        Args:
            data: Encoded input image
            options: Compression options

        Returns:
            Encoded output image

        Raises:
            BackendUnavailableError: If the engine cannot be loaded
            BackendCompressionFailedError: If the engine fails on this input
        """
        pass

    def is_available(self) -> bool:
        """
        Report whether the engine can be used in this process.

        Returns:
            True if the backend's library or tool is present
        """
        return True

    @staticmethod
    def validate_input(data: bytes) -> None:
        if not isinstance(data, (bytes, bytearray)) or len(data) == 0:
            raise InvalidInputError("Input buffer must be a non-empty bytes object")

    @staticmethod
    def keep_if_smaller(original: bytes, compressed: bytes) -> bytes:
        """
        Return compressed only if it saves more than 2% over original.

        Args:
            original: Input handed to the backend
            compressed: Backend output

        Returns:
            compressed, or original when the saving is negligible or negative
        """
        if len(compressed) >= len(original) * ADAPTER_KEEP_RATIO:
            return original
        return compressed


class BackendRegistry:
    """
    Maps backend identifiers to adapters and records their availability.

    Availability is probed once per registry, on first use.
    """

    def __init__(self, backends: Iterable[Backend]):
        self._backends: Dict[BackendId, Backend] = {}
        for backend in backends:
            self._backends[backend.name] = backend
        self._availability: Optional[Dict[BackendId, bool]] = None

    def ids(self) -> List[BackendId]:
        return list(self._backends)

    def get(self, backend_id: BackendId) -> Backend:
        """
        Resolve a usable backend.

        Args:
            backend_id: Backend to resolve

        Returns:
            The registered adapter

        Raises:
            BackendUnavailableError: If the backend is unregistered or unavailable
        """
        backend = self._backends.get(backend_id)
        if backend is None:
            raise BackendUnavailableError(f"Backend {backend_id.value} is not registered")
        if not self.availability().get(backend_id, False):
            raise BackendUnavailableError(f"Backend {backend_id.value} not available")
        return backend

    def availability(self) -> Dict[BackendId, bool]:
        """
        Probe every registered backend once.

        Returns:
            Mapping of backend id to availability
        """
        if self._availability is None:
            availability = {}
            for backend_id, backend in self._backends.items():
                try:
                    available = bool(backend.is_available())
                except Exception as e:
                    logger.warning(f"Availability probe for {backend_id.value} failed: {e}")
                    available = False
                if available:
                    logger.debug(f"Backend {backend_id.value} is available")
                else:
                    logger.debug(f"Backend {backend_id.value} is not available")
                availability[backend_id] = available
            self._availability = availability
        return self._availability

    def supports_metadata(self, backend_id: BackendId) -> bool:
        backend = self._backends.get(backend_id)
        return backend is not None and backend.supports_metadata

    def metadata_capable(self, backend_ids: Iterable[BackendId]) -> List[BackendId]:
        """Filter backend_ids to those able to preserve metadata, keeping order."""
        return [backend_id for backend_id in backend_ids if self.supports_metadata(backend_id)]
