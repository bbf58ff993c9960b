"""
Per-backend attempt records and the arbitration outcome.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from imagerace.models.base import BackendId


class CompressionAttempt(BaseModel):
    """Outcome of invoking one backend once"""
    model_config = ConfigDict(frozen=True)

    backend: BackendId = Field(..., description="Backend that produced this attempt")
    output_bytes: bytes = Field(..., repr=False, description="Output, or the original input on failure")
    output_size: int = Field(..., ge=0, description="Length of output_bytes")
    succeeded: bool = Field(..., description="Whether the backend completed")
    error_message: Optional[str] = Field(None, description="Failure cause")
    duration_ms: int = Field(0, ge=0, description="Wall time of the invocation in milliseconds")

    @model_validator(mode="after")
    def _check_size(self) -> "CompressionAttempt":
        if self.output_size != len(self.output_bytes):
            raise ValueError(
                f"output_size {self.output_size} does not match {len(self.output_bytes)} output bytes"
            )
        return self

    @classmethod
    def success(cls, backend: BackendId, output: bytes, duration_ms: int) -> "CompressionAttempt":
        return cls(
            backend=backend,
            output_bytes=output,
            output_size=len(output),
            succeeded=True,
            duration_ms=duration_ms,
        )

    @classmethod
    def failure(
        cls, backend: BackendId, original: bytes, error_message: str, duration_ms: int
    ) -> "CompressionAttempt":
        return cls(
            backend=backend,
            output_bytes=original,
            output_size=len(original),
            succeeded=False,
            error_message=error_message,
            duration_ms=duration_ms,
        )

    @classmethod
    def original(cls, data: bytes) -> "CompressionAttempt":
        """Synthetic attempt standing for the untouched input"""
        return cls(
            backend=BackendId.ORIGINAL,
            output_bytes=data,
            output_size=len(data),
            succeeded=True,
            duration_ms=0,
        )


class ArbitrationResult(BaseModel):
    """Winner plus every collected attempt for one request"""
    model_config = ConfigDict(frozen=True)

    winning_attempt: CompressionAttempt
    all_attempts: List[CompressionAttempt]
    total_duration_ms: int = Field(..., ge=0)
