"""
Shared fixtures: in-memory fake backends and generated images.
"""
import io
import asyncio
from typing import Callable, List, Optional, Union

import pytest
from PIL import Image

from imagerace.backends import Backend, BackendRegistry
from imagerace.core.signature import PNG_MAGIC
from imagerace.models import BackendId, CompressionOptions


class FakeBackend(Backend):
    """Backend returning canned output, optionally after a delay or with an error."""

    def __init__(
        self,
        name: BackendId,
        output: Union[bytes, Callable[[bytes], bytes], None] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
        supports_metadata: bool = False,
        available: bool = True,
    ):
        self.name = name
        self.output = output
        self.error = error
        self.delay = delay
        self.supports_metadata = supports_metadata
        self.available = available
        self.calls = 0
        self.received: List[CompressionOptions] = []

    def is_available(self) -> bool:
        return self.available

    async def compress(self, data: bytes, options: CompressionOptions) -> bytes:
        self.calls += 1
        self.received.append(options)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if callable(self.output):
            return self.output(data)
        return self.output


def png_bytes(size: int) -> bytes:
    """A buffer of the given size carrying the PNG signature."""
    return PNG_MAGIC + bytes(size - len(PNG_MAGIC))


def make_image(fmt: str = "JPEG", size=(64, 64), **save_params) -> bytes:
    """Encode a noisy RGB image; noise keeps high-quality encodes large."""
    img = Image.effect_noise(size, 60).convert("RGB")
    buffer = io.BytesIO()
    img.save(buffer, format=fmt, **save_params)
    return buffer.getvalue()


@pytest.fixture
def png_67() -> bytes:
    return png_bytes(67)


@pytest.fixture
def make_registry():
    def _make(*backends: Backend) -> BackendRegistry:
        return BackendRegistry(backends)
    return _make


@pytest.fixture
def events():
    collected = []

    def sink(event, payload):
        collected.append((event, payload))

    sink.collected = collected
    return sink
