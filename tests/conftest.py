from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from frext.infrastructure.clients.api_http import ClientConfig, FrextApiClient

BASE_URL = "https://api.example.com"

OCR_DATA: dict[str, Any] = {
    "extractedText": "店舗名: テスト商店\n金額: 1,500円",
    "confidence": 0.95,
    "processingTime": 1200,
}

GPT_DATA: dict[str, Any] = {
    "summary": "日用品の購入記録です。",
    "categories": ["日用品", "食費"],
    "extractedData": {"totalAmount": 1500, "vendor": "テスト商店"},
    "confidence": 0.92,
}

TEMPLATES_DATA: list[dict[str, Any]] = [
    {
        "id": 1,
        "name": "レシート処理",
        "description": "食費や日用品の管理に",
        "category": "receipt",
        "expectedFields": ["totalAmount", "date", "vendor"],
        "usageCount": 42,
        "isActive": True,
    },
    {
        "id": 2,
        "name": "請求書処理",
        "description": "ビジネス支出の管理に",
        "category": "invoice",
        "expectedFields": ["amount", "dueDate"],
        "usageCount": 7,
        "isActive": True,
    },
]

USER_DATA: dict[str, Any] = {
    "id": "u-1",
    "email": "user@example.com",
    "name": "Test User",
    "createdAt": "2025-01-26T00:00:00Z",
}


def ok(data: Any = None, **extra: Any) -> httpx.Response:
    return httpx.Response(200, json={"success": True, "data": data, **extra})


Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def make_client() -> Callable[..., FrextApiClient]:
    def factory(handler: Handler, *, token: str | None = None, timeout_seconds: float = 5) -> FrextApiClient:
        return FrextApiClient(
            ClientConfig(base_url=BASE_URL, timeout_seconds=timeout_seconds),
            token=token,
            transport=httpx.MockTransport(handler),
        )

    return factory
