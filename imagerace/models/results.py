"""
Caller-facing result models.

compression_ratio fields hold the percentage of bytes saved relative to
the original input; negative values mean the output grew.
"""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from imagerace.models.base import BackendId


class BlobResult(BaseModel):
    """Blob-like wrapper around compressed bytes"""
    model_config = ConfigDict(frozen=True)

    type: str = Field("image/png", description="MIME type")
    size: int = Field(..., ge=0, description="Size in bytes")
    data: bytes = Field(..., repr=False, description="Wrapped bytes")

    async def read_all_bytes(self) -> bytes:
        return self.data


class FileResult(BlobResult):
    """File-like wrapper: a blob with a name"""
    name: str = Field("compressed", description="File name")


class CompressResultItem(BaseModel):
    """One backend outcome, materialized"""
    backend: BackendId
    result: Any = Field(..., description="Materialized output in the requested representation")
    original_size: int
    compressed_size: int
    compression_ratio: float
    duration_ms: int
    succeeded: bool
    error_message: Optional[str] = None


class MultipleCompressResults(BaseModel):
    """Winner plus every backend outcome"""
    best_result: Any = Field(..., description="Materialized winning output")
    best_backend: BackendId
    all_results: List[CompressResultItem]
    total_duration_ms: int


class BackendStats(BaseModel):
    """Per-backend statistics"""
    backend: BackendId
    size: int
    duration_ms: int
    compression_ratio: float
    succeeded: bool
    error_message: Optional[str] = None


class CompressionStats(BaseModel):
    """Statistics report for one compression request"""
    best_backend: BackendId
    compressed_file: BlobResult
    original_size: int
    compressed_size: int
    compression_ratio: float
    total_duration_ms: int
    per_backend: List[BackendStats]
    cpu_usage: float = Field(..., description="CPU usage after the race (%)")
    memory_usage: float = Field(..., description="Memory usage after the race (%)")
    psnr: Optional[float] = Field(None, description="PSNR of the winner against the original")
    ssim: Optional[float] = Field(None, description="SSIM of the winner against the original")
