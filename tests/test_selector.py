import pytest

from imagerace.backends import default_registry
from imagerace.core.selector import TOOL_COLLECTIONS, select_backends
from imagerace.exceptions import NoCapableBackendError
from imagerace.models import BackendId, ContainerType
from tests.conftest import FakeBackend


def test_png_candidates_in_order():
    assert select_backends(ContainerType.PNG) == [BackendId.PILLOW, BackendId.CLI, BackendId.TINIFY]


def test_unknown_uses_jpeg_candidates():
    assert select_backends(ContainerType.UNKNOWN) == TOOL_COLLECTIONS[ContainerType.JPEG]


def test_gif_only_uses_cli():
    assert select_backends(ContainerType.GIF) == [BackendId.CLI]


def test_returned_list_is_a_copy():
    backends = select_backends(ContainerType.PNG)
    backends.clear()
    assert TOOL_COLLECTIONS[ContainerType.PNG]


def test_metadata_filter_with_stock_backends():
    selected = select_backends(ContainerType.JPEG, preserve_metadata=True, registry=default_registry())
    assert selected == [BackendId.PILLOW, BackendId.CLI]


def test_metadata_filter_defaults_to_stock_registry():
    assert select_backends(ContainerType.WEBP, preserve_metadata=True) == [BackendId.PILLOW, BackendId.CLI]


def test_no_capable_backend(make_registry):
    registry = make_registry(FakeBackend(BackendId.CLI, output=b"x", supports_metadata=False))
    with pytest.raises(NoCapableBackendError):
        select_backends(ContainerType.GIF, preserve_metadata=True, registry=registry)


def test_custom_collections():
    collections = {ContainerType.JPEG: [BackendId.TINIFY]}
    assert select_backends(ContainerType.UNKNOWN, collections=collections) == [BackendId.TINIFY]
    assert select_backends(ContainerType.PNG, collections=collections) == []
