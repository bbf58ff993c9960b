import base64

import pytest

from imagerace.core.materializer import materialize, mime_type_from_file_name
from imagerace.models import BlobResult, FileResult, OutputRepresentation


DATA = b"\x89PNG\r\n\x1a\n-payload-"


def test_bytes_is_identity():
    assert materialize(DATA, OutputRepresentation.BYTES) == DATA


def test_base64_round_trip():
    encoded = materialize(DATA, "base64")
    assert isinstance(encoded, str)
    assert base64.b64decode(encoded) == DATA


def test_blob_uses_file_name_extension():
    blob = materialize(DATA, "blob", "photo.JPG")
    assert isinstance(blob, BlobResult)
    assert not isinstance(blob, FileResult)
    assert blob.type == "image/jpeg"
    assert blob.size == len(DATA)
    assert blob.data == DATA


def test_blob_defaults_to_png():
    assert materialize(DATA, "blob").type == "image/png"
    assert materialize(DATA, "blob", "archive.xyz").type == "image/png"


def test_file_has_name():
    result = materialize(DATA, "file", "icon.webp")
    assert isinstance(result, FileResult)
    assert result.name == "icon.webp"
    assert result.type == "image/webp"


def test_file_default_name():
    assert materialize(DATA, "file").name == "compressed"


async def test_blob_is_readable():
    blob = materialize(DATA, "blob")
    assert await blob.read_all_bytes() == DATA


@pytest.mark.parametrize("representation", list(OutputRepresentation))
def test_empty_input_is_valid(representation):
    result = materialize(b"", representation)
    if representation == OutputRepresentation.BYTES:
        assert result == b""
    elif representation == OutputRepresentation.BASE64:
        assert result == ""
    else:
        assert result.size == 0


@pytest.mark.parametrize("name, expected", [
    ("a.png", "image/png"),
    ("a.jpeg", "image/jpeg"),
    ("a.gif", "image/gif"),
    ("a.bmp", "image/bmp"),
    ("a.tiff", "image/tiff"),
    ("a.svg", "image/svg+xml"),
    ("noext", None),
    (None, None),
])
def test_mime_type_from_file_name(name, expected):
    assert mime_type_from_file_name(name) == expected
