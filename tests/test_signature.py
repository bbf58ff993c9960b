import pytest

from imagerace.core.signature import (
    PNG_MAGIC,
    classify,
    mime_type_for_container,
    selection_type
)
from imagerace.models import ContainerType
from tests.conftest import make_image


@pytest.mark.parametrize("data, expected", [
    (PNG_MAGIC + b"rest", ContainerType.PNG),
    (b"\xff\xd8\xff\xe0", ContainerType.JPEG),
    (b"RIFF\x00\x00\x00\x00WEBPVP8 ", ContainerType.WEBP),
    (b"GIF87a....", ContainerType.GIF),
    (b"GIF89a....", ContainerType.GIF),
    (b"BM\x00\x00", ContainerType.UNKNOWN),
    (b"", ContainerType.UNKNOWN),
])
def test_classify_signatures(data, expected):
    assert classify(data) == expected


def test_classify_short_buffers_fall_through():
    assert classify(PNG_MAGIC[:7]) == ContainerType.UNKNOWN
    assert classify(b"\xff") == ContainerType.UNKNOWN
    assert classify(b"RIFF\x00\x00\x00\x00WEB") == ContainerType.UNKNOWN


def test_riff_without_webp_tag_is_unknown():
    assert classify(b"RIFF\x00\x00\x00\x00WAVEfmt ") == ContainerType.UNKNOWN


def test_png_checked_before_other_signatures():
    assert classify(PNG_MAGIC + b"GIF89a") == ContainerType.PNG


def test_classify_real_encodes():
    assert classify(make_image("PNG")) == ContainerType.PNG
    assert classify(make_image("JPEG")) == ContainerType.JPEG
    assert classify(make_image("WEBP")) == ContainerType.WEBP
    assert classify(make_image("GIF")) == ContainerType.GIF


def test_unknown_selects_as_jpeg():
    assert selection_type(ContainerType.UNKNOWN) == ContainerType.JPEG
    assert selection_type(ContainerType.GIF) == ContainerType.GIF
    assert mime_type_for_container(ContainerType.UNKNOWN) == "image/jpeg"
    assert mime_type_for_container(ContainerType.WEBP) == "image/webp"
