import logging

import pytest
from pydantic import ValidationError

from imagerace.models import (
    BackendId,
    CompressionAttempt,
    CompressionOptions,
    CompressionRequest,
    ToolConfig
)
from imagerace.settings import DEFAULT_TOOL_TIMEOUT, Settings
from imagerace.utils import configure_logging
from imagerace.utils.metrics import PerformanceTimer, compression_ratio


def test_option_defaults():
    options = CompressionOptions()
    assert options.quality == 0.6
    assert options.mode.value == "keepSize"
    assert options.output_representation.value == "bytes"
    assert options.preserve_metadata is False
    assert options.return_all_attempts is False
    assert options.quality_percent == 60
    assert options.wants_resize is False


def test_options_are_immutable():
    options = CompressionOptions()
    with pytest.raises(ValidationError):
        options.quality = 0.9


@pytest.mark.parametrize("fields", [
    {"quality": -0.1},
    {"quality": 1.1},
    {"mode": "smallest"},
    {"max_width": 0},
    {"output_representation": "xml"},
])
def test_invalid_options(fields):
    with pytest.raises(ValidationError):
        CompressionOptions(**fields)


def test_api_key_lookup():
    options = CompressionOptions(tool_configs=[ToolConfig(name=BackendId.TINIFY, key="k")])
    assert options.api_key_for(BackendId.TINIFY) == "k"
    assert options.api_key_for(BackendId.PILLOW) is None


def test_attempt_size_must_match_bytes():
    with pytest.raises(ValidationError):
        CompressionAttempt(backend=BackendId.CLI, output_bytes=b"abc", output_size=4, succeeded=True)


def test_failed_attempt_carries_original():
    attempt = CompressionAttempt.failure(BackendId.CLI, b"orig", "boom", 7)
    assert attempt.output_bytes == b"orig"
    assert attempt.output_size == 4
    assert attempt.succeeded is False


def test_request_rejects_empty_data():
    with pytest.raises(ValidationError):
        CompressionRequest(data=b"")


def test_settings_from_env():
    settings = Settings.from_env({
        "LOG_LEVEL": "debug",
        "TINIFY_API_KEY": "secret",
        "PNGQUANT_PATH": "/opt/pngquant",
        "IMAGERACE_TOOL_TIMEOUT": "not-a-number",
    })
    assert settings.log_level == "DEBUG"
    assert settings.tinify_api_key == "secret"
    assert settings.pngquant_path == "/opt/pngquant"
    assert settings.jpegtran_path == "jpegtran"
    assert settings.tool_timeout == DEFAULT_TOOL_TIMEOUT


def test_empty_api_key_is_none():
    assert Settings.from_env({"TINIFY_API_KEY": ""}).tinify_api_key is None


def test_configure_logging(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    configure_logging()
    assert calls[0]["level"] == logging.WARNING


def test_compression_ratio():
    assert compression_ratio(200, 150) == 25.0
    assert compression_ratio(100, 120) == -20.0
    assert compression_ratio(0, 10) == 0.0


def test_performance_timer():
    with PerformanceTimer() as timer:
        pass
    assert timer.duration_ms >= 0
