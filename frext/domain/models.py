"""Wire models for the frext API.

The backend speaks camelCase JSON; attributes here are snake_case and the
camelCase names are accepted and produced through aliases.
"""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

_SUFFIX_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".heic": "image/heic",
}


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class OCRResult(WireModel):
    """Text extracted from an image by the backend OCR stage."""

    extracted_text: str
    confidence: float = Field(ge=0.0, le=1.0)
    processing_time: float


class GPTResult(WireModel):
    """Summary and structured data produced by the GPT stage."""

    summary: str
    categories: list[str] = Field(default_factory=list)
    extracted_data: dict[str, Any] = Field(default_factory=dict)
    confidence: float = Field(ge=0.0, le=1.0)


class Template(WireModel):
    id: int
    name: str
    description: str
    category: str
    expected_fields: list[str] = Field(default_factory=list)
    usage_count: int = 0
    is_active: bool = True


class User(WireModel):
    id: str
    email: str
    name: str
    avatar: str | None = None
    created_at: str


ProcessingStatus = Literal["pending", "processing", "completed", "failed"]


class ProcessingHistory(WireModel):
    id: str
    user_id: str
    file_name: str
    template_id: int | None = None
    template_name: str | None = None
    ocr_result: OCRResult
    gpt_result: GPTResult
    status: ProcessingStatus
    created_at: str
    processing_duration: float


class HistoryPage(WireModel):
    items: list[ProcessingHistory]
    total: int
    page: int
    limit: int
    total_pages: int


class HistoryFilters(WireModel):
    template_id: int | None = None
    date_from: str | None = None
    date_to: str | None = None
    status: str | None = None


class SavedResult(WireModel):
    id: str


class ProcessingResultRecord(WireModel):
    id: str
    ocr_result: OCRResult
    gpt_result: GPTResult
    template_id: int | None = None
    created_at: str
    metadata: dict[str, Any] | None = None


class TemplateUsage(WireModel):
    template_id: int
    name: str
    count: int


class DailyUsage(WireModel):
    date: str
    count: int
    tokens: int


class UsageStats(WireModel):
    total_processed: int
    tokens_used: int
    success_rate: float
    average_confidence: float
    top_templates: list[TemplateUsage] = Field(default_factory=list)
    daily_stats: list[DailyUsage] = Field(default_factory=list)


UsagePeriod = Literal["day", "week", "month"]


class SystemInfo(WireModel):
    version: str
    status: str
    uptime: float
    features: list[str] = Field(default_factory=list)


class HealthStatus(WireModel):
    status: str
    version: str | None = None


class AuthSession(WireModel):
    token: str
    user: User


class VerifiedUser(WireModel):
    user: User


class CompleteResult(WireModel):
    ocr_result: OCRResult
    gpt_result: GPTResult


class OCROptions(WireModel):
    language_hints: list[str] | None = None
    document_type: str | None = None


class UploadFile(BaseModel):
    """An image selected for upload, held in memory."""

    filename: str
    content: bytes
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: Path | str, content_type: str | None = None) -> "UploadFile":
        p = Path(path)
        ctype = content_type or _SUFFIX_TYPES.get(p.suffix.lower()) or mimetypes.guess_type(p.name)[0]
        return cls(filename=p.name, content=p.read_bytes(), content_type=ctype or "application/octet-stream")


class OCRRequest(BaseModel):
    image: UploadFile
    template_id: int | None = None
    options: OCROptions | None = None


class GPTRequest(WireModel):
    ocr_result: OCRResult
    template_id: int | None = None
    custom_prompt: str | None = None


class SaveResultRequest(WireModel):
    ocr_result: OCRResult
    gpt_result: GPTResult
    template_id: int | None = None
    metadata: dict[str, Any] | None = None


class ApiResponse(WireModel, Generic[T]):
    """Uniform success/data/error envelope returned by every backend call.

    ``success`` and ``data`` are not cross-validated; ``code`` names the
    failure cause for programmatic handling.
    """

    success: bool
    data: T | None = None
    error: str | None = None
    message: str | None = None
    code: str | None = None
    status_code: int | None = None


class StoredProcessingResult(WireModel):
    """Last upload's result, held in session storage until displayed."""

    ocr_result: OCRResult
    gpt_result: GPTResult
    template_id: int | None = None
    file_name: str
    timestamp: str
