from __future__ import annotations

import json

import httpx
import pytest

from conftest import GPT_DATA, OCR_DATA, TEMPLATES_DATA, USER_DATA, ok
from frext.application import operations
from frext.domain.errors import FrextApiError
from frext.domain.models import (
    GPTRequest,
    HistoryFilters,
    OCROptions,
    OCRRequest,
    OCRResult,
    SaveResultRequest,
    GPTResult,
    UploadFile,
)


def _image() -> UploadFile:
    return UploadFile(filename="receipt.jpg", content=b"\xff\xd8\xff", content_type="image/jpeg")


@pytest.mark.asyncio
async def test_process_ocr_builds_multipart_form(make_client) -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        if request.url.path == "/api/v1/ocr/process":
            return ok(OCR_DATA)
        return httpx.Response(404)

    client = make_client(handler)
    resp = await operations.process_ocr(
        client,
        OCRRequest(image=_image(), template_id=3, options=OCROptions(language_hints=["ja"], document_type="receipt")),
    )

    assert resp.success is True
    assert resp.data.extracted_text.startswith("店舗名")
    body = captured[0].content
    assert b'name="image"; filename="receipt.jpg"' in body
    assert b'name="templateId"' in body and b"\r\n\r\n3\r\n" in body
    assert b'{"languageHints": ["ja"], "documentType": "receipt"}' in body


@pytest.mark.asyncio
async def test_process_ocr_omits_optional_fields(make_client) -> None:
    captured: list[bytes] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request.content)
        return ok(OCR_DATA)

    await operations.process_ocr(make_client(handler), OCRRequest(image=_image()))

    assert b'name="templateId"' not in captured[0]
    assert b'name="options"' not in captured[0]


@pytest.mark.asyncio
async def test_process_gpt_posts_camel_case_json(make_client) -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/gpt/process"
        bodies.append(json.loads(request.content))
        return ok(GPT_DATA)

    ocr = OCRResult.model_validate(OCR_DATA)
    resp = await operations.process_gpt(make_client(handler), GPTRequest(ocr_result=ocr, template_id=1))

    assert resp.success is True
    assert resp.data.categories == ["日用品", "食費"]
    assert bodies[0]["ocrResult"]["extractedText"] == OCR_DATA["extractedText"]
    assert bodies[0]["templateId"] == 1
    assert "customPrompt" not in bodies[0]


@pytest.mark.asyncio
async def test_process_complete_returns_both_results(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/process/complete"
        return ok({"ocrResult": OCR_DATA, "gptResult": GPT_DATA})

    resp = await operations.process_complete(make_client(handler), OCRRequest(image=_image()))

    assert resp.success is True
    assert resp.data.gpt_result.extracted_data["totalAmount"] == 1500


@pytest.mark.asyncio
async def test_get_template_by_id(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/templates/2"
        return ok(TEMPLATES_DATA[1])

    resp = await operations.get_template(make_client(handler), 2)
    assert resp.data.name == "請求書処理"


@pytest.mark.asyncio
async def test_history_query_string_carries_page_and_filters(make_client) -> None:
    seen: list[httpx.URL] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return ok({"items": [], "total": 0, "page": 2, "limit": 5, "totalPages": 0})

    client = make_client(handler)
    resp = await operations.get_processing_history(
        client,
        page=2,
        limit=5,
        filters=HistoryFilters(template_id=1, status="completed"),
    )

    assert resp.success is True
    params = dict(seen[0].params)
    assert params == {"page": "2", "limit": "5", "templateId": "1", "status": "completed"}

    await operations.get_processing_history(client)
    assert dict(seen[1].params) == {"page": "1", "limit": "20"}


@pytest.mark.asyncio
async def test_save_and_get_processing_result(make_client) -> None:
    saved: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/v1/results/save":
            saved.append(json.loads(request.content))
            return ok({"id": "res-1"})
        if request.url.path == "/api/v1/results/res-1":
            return ok({"id": "res-1", "ocrResult": OCR_DATA, "gptResult": GPT_DATA, "createdAt": "2025-01-26"})
        return httpx.Response(404)

    client = make_client(handler)
    req = SaveResultRequest(
        ocr_result=OCRResult.model_validate(OCR_DATA),
        gpt_result=GPTResult.model_validate(GPT_DATA),
        metadata={"source": "test"},
    )
    save_resp = await operations.save_processing_result(client, req)
    assert save_resp.data.id == "res-1"
    assert saved[0]["metadata"] == {"source": "test"}

    get_resp = await operations.get_processing_result(client, "res-1")
    assert get_resp.data.gpt_result.summary == GPT_DATA["summary"]


@pytest.mark.asyncio
async def test_profile_usage_and_system_info(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/api/v1/user/profile":
            return ok(USER_DATA)
        if path == "/api/v1/user/usage-stats":
            assert request.url.params["period"] == "week"
            return ok(
                {
                    "totalProcessed": 10,
                    "tokensUsed": 2000,
                    "successRate": 0.9,
                    "averageConfidence": 0.88,
                    "topTemplates": [{"templateId": 1, "name": "レシート処理", "count": 8}],
                    "dailyStats": [{"date": "2025-01-26", "count": 3, "tokens": 600}],
                }
            )
        if path == "/api/v1/system/info":
            return ok({"version": "1.0.0", "status": "ok", "uptime": 120, "features": ["ocr", "gpt"]})
        return httpx.Response(404)

    client = make_client(handler)
    assert (await operations.get_user_profile(client)).data.email == "user@example.com"
    stats = (await operations.get_usage_stats(client, "week")).data
    assert stats.top_templates[0].count == 8
    info = (await operations.get_system_info(client)).data
    assert info.features == ["ocr", "gpt"]


@pytest.mark.asyncio
async def test_connection_check(make_client) -> None:
    def up(request: httpx.Request) -> httpx.Response:
        return ok({"status": "ok", "version": "1.0.0"})

    def down(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    assert await operations.test_connection(make_client(up)) is True
    assert await operations.test_connection(make_client(down)) is False


@pytest.mark.asyncio
async def test_handle_api_error_raises_with_code(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"message": "boom"})

    resp = await operations.get_templates(make_client(handler))
    with pytest.raises(FrextApiError) as excinfo:
        operations.handle_api_error(resp)
    assert excinfo.value.message == "boom"
    assert excinfo.value.code == "HTTP_ERROR"
    assert excinfo.value.status_code == 500
