from __future__ import annotations

from typing import Any

from frext.domain.models import ApiResponse


ERROR_REGISTRY: dict[str, dict[str, Any]] = {
    "TIMEOUT": {
        "message": "リクエストがタイムアウトしました。時間をおいて再試行してください。",
    },
    "NETWORK_ERROR": {
        "message": "frext-apiサーバーに接続できません。ネットワーク接続を確認してください。",
    },
    "REQUEST_FAILED": {
        "message": "Unknown error occurred",
    },
    "HTTP_ERROR": {
        "message": "frext-api request failed",
    },
    "INVALID_RESPONSE": {
        "message": "frext-apiから不正な応答を受信しました",
    },
    "API_CALL_FAILED": {
        "message": "frext-api呼び出しに失敗しました",
    },
    "OCR_FAILED": {
        "message": "OCR処理に失敗しました",
    },
    "GPT_FAILED": {
        "message": "GPT処理に失敗しました",
    },
    "PROCESS_FAILED": {
        "message": "処理に失敗しました",
    },
    "TEMPLATES_FAILED": {
        "message": "テンプレートの取得に失敗しました",
    },
    "PROFILE_FAILED": {
        "message": "ユーザー情報の取得に失敗しました",
    },
    "FILE_REQUIRED": {
        "message": "ファイルを選択してください",
    },
    "FILE_TOO_LARGE": {
        "message": "ファイルサイズは{limit}以下にしてください（現在: {size}）",
    },
    "UNSUPPORTED_FILE_TYPE": {
        "message": "対応している画像ファイル（JPEG, PNG, WebP, HEIC）を選択してください",
    },
    "RESULT_NOT_FOUND": {
        "message": "処理結果が見つかりません",
    },
    "RESULT_LOAD_FAILED": {
        "message": "処理結果の読み込みに失敗しました",
    },
    "RESULT_SAVE_FAILED": {
        "message": "処理結果の保存に失敗しました",
    },
    "RESULT_EXPORT_FAILED": {
        "message": "処理結果のエクスポートに失敗しました",
    },
}


def message_for(code: str, **params: Any) -> str:
    meta = ERROR_REGISTRY.get(code, {"message": code})
    msg = str(meta.get("message", code))
    return msg.format(**params) if params else msg


def to_error_response(code: str, *, message: str | None = None, status_code: int | None = None) -> ApiResponse[Any]:
    return ApiResponse[Any](
        success=False,
        error=message or message_for(code),
        code=code,
        status_code=status_code,
    )
