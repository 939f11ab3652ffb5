"""Upload and result use-cases.

UploadWorkflow: select an image, validate it locally, run OCR then GPT
through the backend and keep the outcome in session storage under
``processingResult``. ResultViewer: read that record back and persist it
through the API.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Literal

from pydantic import ValidationError

from frext.application import operations
from frext.application.state.base import StateHolder, StateModel
from frext.application.state.processes import CompleteProcess, CompleteProcessState
from frext.application.uploads import format_file_size, validate_upload
from frext.core.logging import get_logger
from frext.domain.constants import MAX_UPLOAD_BYTES, PROCESSING_RESULT_KEY, STEP_MESSAGES
from frext.domain.errors import FrextApiError, StorageError, UploadValidationError
from frext.domain.models import SaveResultRequest, StoredProcessingResult, UploadFile
from frext.domain.ports.storage_port import KeyValueStore
from frext.infrastructure.clients.api_http import FrextApiClient
from frext.observability.errors import message_for

logger = get_logger(__name__)

UploadStep = Literal["upload", "ocr", "gpt", "complete"]

_STEP_FOR_PROGRESS: dict[str, UploadStep] = {
    "uploading": "ocr",
    "ocr": "ocr",
    "gpt": "gpt",
}


class UploadWorkflowState(StateModel):
    selected_file: UploadFile | None = None
    template_id: int | None = None
    is_processing: bool = False
    error: str = ""
    step: UploadStep = "upload"

    @property
    def step_message(self) -> str:
        return STEP_MESSAGES.get(self.step, "")


class UploadWorkflow(StateHolder[UploadWorkflowState]):
    def __init__(
        self,
        client: FrextApiClient,
        session_store: KeyValueStore,
        *,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
    ) -> None:
        super().__init__(UploadWorkflowState())
        self._client = client
        self._session_store = session_store
        self._max_upload_bytes = max_upload_bytes

    def select_file(self, file: UploadFile) -> bool:
        """Validate and select ``file``; on rejection the previous selection is kept."""
        try:
            validate_upload(file, max_bytes=self._max_upload_bytes)
        except UploadValidationError as e:
            self._update(error=e.message)
            return False
        self._update(selected_file=file, error="")
        return True

    def select_template(self, template_id: int | None) -> None:
        self._update(template_id=template_id)

    def _follow_progress(self, state: CompleteProcessState) -> None:
        step = _STEP_FOR_PROGRESS.get(state.progress)
        if step is not None and step != self.state.step:
            self._update(step=step)

    async def process(self) -> StoredProcessingResult | None:
        file = self.state.selected_file
        if file is None:
            self._update(error=message_for("FILE_REQUIRED"))
            return None

        self._update(is_processing=True, error="")
        logger.info(
            "upload_processing_started",
            extra={"upload_name": file.filename, "file_size": format_file_size(file.size)},
        )
        process = CompleteProcess(self._client)
        unsubscribe = process.subscribe(self._follow_progress)
        try:
            result = await process.process_complete(file, self.state.template_id)
        except FrextApiError as e:
            self._update(error=e.message, step="upload", is_processing=False)
            return None
        finally:
            unsubscribe()

        stored = StoredProcessingResult(
            ocr_result=result.ocr_result,
            gpt_result=result.gpt_result,
            template_id=self.state.template_id,
            file_name=file.filename,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        try:
            self._session_store.set_item(PROCESSING_RESULT_KEY, stored.model_dump_json(by_alias=True))
        except StorageError as e:
            logger.error("processing_result_store_failed", extra={"error": str(e)})
            self._update(error=message_for("RESULT_SAVE_FAILED"), step="upload", is_processing=False)
            return None

        self._update(step="complete", is_processing=False)
        logger.info("upload_processing_completed", extra={"upload_name": file.filename})
        return stored


class ResultViewerState(StateModel):
    result: StoredProcessingResult | None = None
    error: str | None = None
    is_saving: bool = False
    saved_id: str | None = None


class ResultViewer(StateHolder[ResultViewerState]):
    def __init__(self, client: FrextApiClient, session_store: KeyValueStore) -> None:
        super().__init__(ResultViewerState())
        self._client = client
        self._session_store = session_store

    def load(self) -> StoredProcessingResult | None:
        try:
            raw = self._session_store.get_item(PROCESSING_RESULT_KEY)
        except StorageError as e:
            logger.error("processing_result_read_failed", extra={"error": str(e)})
            self._set_state(ResultViewerState(error=message_for("RESULT_LOAD_FAILED")))
            return None
        if not raw:
            self._set_state(ResultViewerState(error=message_for("RESULT_NOT_FOUND")))
            return None
        try:
            result = StoredProcessingResult.model_validate_json(raw)
        except ValidationError as e:
            logger.error("processing_result_malformed", extra={"error": str(e)})
            self._set_state(ResultViewerState(error=message_for("RESULT_LOAD_FAILED")))
            return None
        self._set_state(ResultViewerState(result=result))
        return result

    async def save(self, metadata: dict[str, Any] | None = None) -> str | None:
        result = self.state.result
        if result is None:
            self._update(error=message_for("RESULT_NOT_FOUND"))
            return None

        self._update(is_saving=True, error=None)
        response = await operations.save_processing_result(
            self._client,
            SaveResultRequest(
                ocr_result=result.ocr_result,
                gpt_result=result.gpt_result,
                template_id=result.template_id,
                metadata={"fileName": result.file_name, **(metadata or {})},
            ),
        )
        if not response.success or response.data is None:
            self._update(is_saving=False, error=response.error or message_for("RESULT_SAVE_FAILED"))
            return None
        self._update(is_saving=False, saved_id=response.data.id)
        return response.data.id

    def export_payload(self) -> dict[str, Any] | None:
        result = self.state.result
        if result is None:
            return None
        return {
            "fileName": result.file_name,
            "processedAt": result.timestamp,
            "template": result.template_id or "generic",
            "ocr": {
                "extractedText": result.ocr_result.extracted_text,
                "confidence": result.ocr_result.confidence,
            },
            "analysis": {
                "summary": result.gpt_result.summary,
                "categories": result.gpt_result.categories,
                "extractedData": result.gpt_result.extracted_data,
                "confidence": result.gpt_result.confidence,
            },
        }

    def export(self, target: Path | str) -> Path | None:
        """Write the loaded result as JSON.

        A directory target gets a `frext-result-YYYY-MM-DD.json` file (UTC date).
        """
        payload = self.export_payload()
        if payload is None:
            self._update(error=message_for("RESULT_NOT_FOUND"))
            return None

        path = Path(target)
        if path.is_dir():
            path = path / f"frext-result-{datetime.now(timezone.utc).date().isoformat()}.json"
        try:
            path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error("processing_result_export_failed", extra={"path": str(path), "error": str(e)})
            self._update(error=message_for("RESULT_EXPORT_FAILED"))
            return None
        logger.info("processing_result_exported", extra={"path": str(path)})
        return path

    def clear(self) -> None:
        try:
            self._session_store.remove_item(PROCESSING_RESULT_KEY)
        except StorageError as e:
            logger.error("processing_result_clear_failed", extra={"error": str(e)})
        self.reset()
