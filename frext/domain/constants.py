from __future__ import annotations

AUTH_TOKEN_KEY = "frext_auth_token"
LOCAL_STORAGE_PREFIX = "frext_"
PROCESSING_RESULT_KEY = "processingResult"

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp", "image/heic")

# Progress messages reported to on_progress callbacks
PROGRESS_UPLOADING = "frext-apiに画像をアップロード中..."
PROGRESS_OCR_PROCESSING = "frext-api経由でOCR処理中..."
PROGRESS_OCR_DONE = "OCR処理完了"
PROGRESS_GPT_ANALYZING = "frext-api経由でAI分析中..."
PROGRESS_GPT_DONE = "AI分析完了"
PROGRESS_COMPLETE_OCR = "OCR処理中..."
PROGRESS_COMPLETE_GPT = "AI分析中..."
PROGRESS_COMPLETE_DONE = "処理完了"

# Upload workflow step messages
STEP_MESSAGES = {
    "ocr": "画像からテキストを抽出中...",
    "gpt": "AIが内容を分析・構造化中...",
    "complete": "処理完了！結果ページに移動します...",
}
