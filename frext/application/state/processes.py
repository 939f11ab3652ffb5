"""OCR / GPT / combined processing state holders.

Each holder records the failure in its state before raising, so listeners
see ``error`` set and results cleared even when the caller lets the
exception propagate.
"""

from __future__ import annotations

from typing import Callable, Literal, NoReturn

from frext.application import operations
from frext.application.state.base import StateHolder, StateModel
from frext.core.logging import get_logger
from frext.domain import constants
from frext.domain.errors import FrextApiError
from frext.domain.models import (
    ApiResponse,
    CompleteResult,
    GPTRequest,
    GPTResult,
    OCROptions,
    OCRRequest,
    OCRResult,
    UploadFile,
)
from frext.infrastructure.clients.api_http import FrextApiClient
from frext.observability.errors import message_for

logger = get_logger(__name__)

ProgressCallback = Callable[[str], None]
PercentProgressCallback = Callable[[str, int], None]


def _failure(response: ApiResponse, default_code: str) -> FrextApiError:
    return FrextApiError(
        response.error or message_for(default_code),
        code=response.code or default_code,
        status_code=response.status_code,
    )


class OCRProcessState(StateModel):
    loading: bool = False
    error: str | None = None
    progress: Literal["idle", "uploading", "processing", "complete"] = "idle"
    result: OCRResult | None = None


class OCRProcess(StateHolder[OCRProcessState]):
    def __init__(self, client: FrextApiClient) -> None:
        super().__init__(OCRProcessState())
        self._client = client

    def _fail(self, exc: FrextApiError) -> NoReturn:
        logger.error("ocr_process_failed", extra={"code": exc.code, "error": exc.message})
        self._set_state(OCRProcessState(error=exc.message))
        raise exc

    async def process_image(
        self,
        file: UploadFile,
        template_id: int | None = None,
        options: OCROptions | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> OCRResult:
        self._set_state(OCRProcessState(loading=True, progress="uploading"))
        if on_progress:
            on_progress(constants.PROGRESS_UPLOADING)

        self._update(progress="processing")
        if on_progress:
            on_progress(constants.PROGRESS_OCR_PROCESSING)

        response = await operations.process_ocr(
            self._client,
            OCRRequest(image=file, template_id=template_id, options=options),
        )
        if not response.success or response.data is None:
            self._fail(_failure(response, "OCR_FAILED"))

        self._set_state(OCRProcessState(progress="complete", result=response.data))
        if on_progress:
            on_progress(constants.PROGRESS_OCR_DONE)
        return response.data


class GPTProcessState(StateModel):
    loading: bool = False
    error: str | None = None
    progress: Literal["idle", "analyzing", "complete"] = "idle"
    result: GPTResult | None = None


class GPTProcess(StateHolder[GPTProcessState]):
    def __init__(self, client: FrextApiClient) -> None:
        super().__init__(GPTProcessState())
        self._client = client

    async def analyze_text(
        self,
        ocr_result: OCRResult,
        template_id: int | None = None,
        custom_prompt: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> GPTResult:
        self._set_state(GPTProcessState(loading=True, progress="analyzing"))
        if on_progress:
            on_progress(constants.PROGRESS_GPT_ANALYZING)

        response = await operations.process_gpt(
            self._client,
            GPTRequest(ocr_result=ocr_result, template_id=template_id, custom_prompt=custom_prompt),
        )
        if not response.success or response.data is None:
            exc = _failure(response, "GPT_FAILED")
            logger.error("gpt_process_failed", extra={"code": exc.code, "error": exc.message})
            self._set_state(GPTProcessState(error=exc.message))
            raise exc

        self._set_state(GPTProcessState(progress="complete", result=response.data))
        if on_progress:
            on_progress(constants.PROGRESS_GPT_DONE)
        return response.data


class CompleteProcessState(StateModel):
    loading: bool = False
    error: str | None = None
    progress: Literal["idle", "uploading", "ocr", "gpt", "complete"] = "idle"
    ocr_result: OCRResult | None = None
    gpt_result: GPTResult | None = None


class CompleteProcess(StateHolder[CompleteProcessState]):
    """OCR followed by GPT on the OCR output, strictly in sequence.

    A failure at either stage clears both results.
    """

    def __init__(self, client: FrextApiClient) -> None:
        super().__init__(CompleteProcessState())
        self._client = client

    def _fail(self, exc: FrextApiError) -> NoReturn:
        logger.error("complete_process_failed", extra={"code": exc.code, "error": exc.message})
        self._set_state(CompleteProcessState(error=exc.message))
        raise exc

    async def process_complete(
        self,
        file: UploadFile,
        template_id: int | None = None,
        options: OCROptions | None = None,
        on_progress: PercentProgressCallback | None = None,
    ) -> CompleteResult:
        self._set_state(CompleteProcessState(loading=True, progress="uploading"))
        if on_progress:
            on_progress(constants.PROGRESS_UPLOADING, 10)

        self._update(progress="ocr")
        if on_progress:
            on_progress(constants.PROGRESS_COMPLETE_OCR, 30)

        ocr_response = await operations.process_ocr(
            self._client,
            OCRRequest(image=file, template_id=template_id, options=options),
        )
        if not ocr_response.success or ocr_response.data is None:
            self._fail(_failure(ocr_response, "OCR_FAILED"))

        self._update(ocr_result=ocr_response.data, progress="gpt")
        if on_progress:
            on_progress(constants.PROGRESS_COMPLETE_GPT, 70)

        gpt_response = await operations.process_gpt(
            self._client,
            GPTRequest(ocr_result=ocr_response.data, template_id=template_id),
        )
        if not gpt_response.success or gpt_response.data is None:
            self._fail(_failure(gpt_response, "GPT_FAILED"))

        result = CompleteResult(ocr_result=ocr_response.data, gpt_result=gpt_response.data)
        self._set_state(
            CompleteProcessState(
                progress="complete",
                ocr_result=result.ocr_result,
                gpt_result=result.gpt_result,
            )
        )
        if on_progress:
            on_progress(constants.PROGRESS_COMPLETE_DONE, 100)
        return result
