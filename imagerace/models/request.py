"""
Request models: compression options and the canonical per-call request.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from imagerace.models.base import BackendId, CompressionMode, OutputRepresentation

DEFAULT_QUALITY = 0.6


class ToolConfig(BaseModel):
    """Credential for a single backend"""
    model_config = ConfigDict(frozen=True)

    name: BackendId = Field(..., description="Backend the credential belongs to")
    key: str = Field(..., min_length=1, description="API key or token")


class CompressionOptions(BaseModel):
    """Options recognized by every compression entry point"""
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    quality: float = Field(
        DEFAULT_QUALITY, ge=0.0, le=1.0,
        description="Requested quality (0-1), also drives the not-worth-it guard"
    )
    mode: CompressionMode = Field(
        CompressionMode.KEEP_SIZE, description="Backend-defined size/quality trade-off"
    )
    target_width: Optional[int] = Field(None, gt=0, description="Exact resize width")
    target_height: Optional[int] = Field(None, gt=0, description="Exact resize height")
    max_width: Optional[int] = Field(None, gt=0, description="Bounding resize width")
    max_height: Optional[int] = Field(None, gt=0, description="Bounding resize height")
    preserve_metadata: bool = Field(
        False, description="Only dispatch backends able to keep EXIF/ICC metadata"
    )
    output_representation: OutputRepresentation = Field(
        OutputRepresentation.BYTES, description="Representation of the returned value"
    )
    return_all_attempts: bool = Field(
        False, description="Return every backend outcome instead of only the winner"
    )
    tool_configs: List[ToolConfig] = Field(
        default_factory=list, description="Per-backend credentials"
    )

    @field_validator("quality", mode="before")
    @classmethod
    def _reject_bool_quality(cls, value):
        if isinstance(value, bool):
            raise ValueError("quality must be a number between 0 and 1")
        return value

    @property
    def quality_percent(self) -> int:
        """Quality scaled to the 1-100 range most codecs expect"""
        return min(100, max(1, round(self.quality * 100)))

    @property
    def wants_resize(self) -> bool:
        return any(
            value is not None
            for value in (self.target_width, self.target_height, self.max_width, self.max_height)
        )

    def api_key_for(self, backend: BackendId) -> Optional[str]:
        """
        Look up a credential supplied through tool_configs.

        Args:
            backend: Backend to look up

        Returns:
            The configured key, or None
        """
        for config in self.tool_configs:
            if config.name == backend:
                return config.key
        return None


class CompressionRequest(BaseModel):
    """Canonical, immutable request seen by the orchestrator"""
    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., min_length=1, repr=False, description="Raw input image bytes")
    options: CompressionOptions = Field(default_factory=CompressionOptions)
    file_name: Optional[str] = Field(None, description="Name of the input file, if known")

    @property
    def original_size(self) -> int:
        return len(self.data)
