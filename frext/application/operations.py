"""frext-api domain operations.

Each function builds the request payload, delegates to the client and
returns its envelope unchanged.
"""

from __future__ import annotations

import json
from typing import Any, NoReturn

from frext.domain.errors import FrextApiError
from frext.domain.models import (
    ApiResponse,
    CompleteResult,
    GPTRequest,
    HistoryFilters,
    HistoryPage,
    OCRRequest,
    OCRResult,
    GPTResult,
    ProcessingResultRecord,
    SaveResultRequest,
    SavedResult,
    SystemInfo,
    Template,
    UsagePeriod,
    UsageStats,
    User,
)
from frext.infrastructure.clients.api_http import FrextApiClient
from frext.observability.errors import message_for


def _image_form(request: OCRRequest) -> tuple[dict[str, Any], dict[str, str]]:
    image = request.image
    files = {"image": (image.filename, image.content, image.content_type)}
    data: dict[str, str] = {}
    if request.template_id:
        data["templateId"] = str(request.template_id)
    if request.options is not None:
        data["options"] = json.dumps(request.options.to_wire(), ensure_ascii=False)
    return files, data


async def process_ocr(client: FrextApiClient, request: OCRRequest) -> ApiResponse[OCRResult]:
    files, data = _image_form(request)
    return await client.post_form("/ocr/process", files=files, data=data, response_type=OCRResult)


async def process_gpt(client: FrextApiClient, request: GPTRequest) -> ApiResponse[GPTResult]:
    return await client.post("/gpt/process", request.to_wire(), response_type=GPTResult)


async def process_complete(client: FrextApiClient, request: OCRRequest) -> ApiResponse[CompleteResult]:
    files, data = _image_form(request)
    return await client.post_form("/process/complete", files=files, data=data, response_type=CompleteResult)


async def get_templates(client: FrextApiClient) -> ApiResponse[list[Template]]:
    return await client.get("/templates", response_type=list[Template])


async def get_template(client: FrextApiClient, template_id: int) -> ApiResponse[Template]:
    return await client.get(f"/templates/{template_id}", response_type=Template, route="/templates/{id}")


async def get_processing_history(
    client: FrextApiClient,
    page: int = 1,
    limit: int = 20,
    filters: HistoryFilters | None = None,
) -> ApiResponse[HistoryPage]:
    params: dict[str, Any] = {"page": str(page), "limit": str(limit)}
    if filters is not None:
        params.update({k: str(v) for k, v in filters.to_wire().items()})
    return await client.get("/history", params=params, response_type=HistoryPage)


async def save_processing_result(client: FrextApiClient, request: SaveResultRequest) -> ApiResponse[SavedResult]:
    return await client.post("/results/save", request.to_wire(), response_type=SavedResult)


async def get_processing_result(client: FrextApiClient, result_id: str) -> ApiResponse[ProcessingResultRecord]:
    return await client.get(f"/results/{result_id}", response_type=ProcessingResultRecord, route="/results/{id}")


async def get_user_profile(client: FrextApiClient) -> ApiResponse[User]:
    return await client.get("/user/profile", response_type=User)


async def get_usage_stats(client: FrextApiClient, period: UsagePeriod = "month") -> ApiResponse[UsageStats]:
    return await client.get("/user/usage-stats", params={"period": period}, response_type=UsageStats)


async def get_system_info(client: FrextApiClient) -> ApiResponse[SystemInfo]:
    return await client.get("/system/info", response_type=SystemInfo)


async def test_connection(client: FrextApiClient) -> bool:
    response = await client.health_check()
    return response.success


def handle_api_error(response: ApiResponse[Any]) -> NoReturn:
    raise FrextApiError(
        response.error or message_for("HTTP_ERROR"),
        code=response.code,
        status_code=response.status_code,
    )
