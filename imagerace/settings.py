"""
Environment-driven configuration.

Settings are read from the process environment each time they are needed;
nothing is cached at import time.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_TOOL_TIMEOUT = 60.0


@dataclass(frozen=True)
class Settings:
    """Runtime settings for backends and logging"""
    log_level: str = DEFAULT_LOG_LEVEL
    tinify_api_key: Optional[str] = None
    pngquant_path: str = "pngquant"
    jpegtran_path: str = "jpegtran"
    gifsicle_path: str = "gifsicle"
    cwebp_path: str = "cwebp"
    tool_timeout: float = DEFAULT_TOOL_TIMEOUT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Settings instance
        """
        env = os.environ if environ is None else environ

        try:
            tool_timeout = float(env.get("IMAGERACE_TOOL_TIMEOUT", DEFAULT_TOOL_TIMEOUT))
        except ValueError:
            tool_timeout = DEFAULT_TOOL_TIMEOUT

        return cls(
            log_level=env.get("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            tinify_api_key=env.get("TINIFY_API_KEY") or None,
            pngquant_path=env.get("PNGQUANT_PATH", "pngquant"),
            jpegtran_path=env.get("JPEGTRAN_PATH", "jpegtran"),
            gifsicle_path=env.get("GIFSICLE_PATH", "gifsicle"),
            cwebp_path=env.get("CWEBP_PATH", "cwebp"),
            tool_timeout=tool_timeout if tool_timeout > 0 else DEFAULT_TOOL_TIMEOUT,
        )
