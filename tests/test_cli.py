from __future__ import annotations

import io
import json
import logging
from pathlib import Path

import httpx
import pytest

from conftest import BASE_URL, GPT_DATA, OCR_DATA, TEMPLATES_DATA, USER_DATA, ok
from frext import cli
from frext.core.config import DEFAULT_API_BASE_URL, Settings, get_settings
from frext.core.logging import configure_logging, request_context
from frext.domain.constants import AUTH_TOKEN_KEY
from frext.infrastructure.clients.api_http import ClientConfig, FrextApiClient
from frext.infrastructure.storage.local_disk_adapter import LocalDiskStore


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


@pytest.fixture
def cli_backend(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.setenv("FREXT_STORAGE_DIR", str(tmp_path))
    get_settings.cache_clear()
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/api/v1/health":
            return ok({"status": "ok", "version": "1.0.0"})
        if request.url.path == "/api/v1/templates":
            return ok(TEMPLATES_DATA)
        if request.url.path == "/api/v1/ocr/process":
            return ok(OCR_DATA)
        if request.url.path == "/api/v1/gpt/process":
            return ok(GPT_DATA)
        if request.url.path == "/api/v1/history":
            return ok({"items": [], "total": 0, "page": 2, "limit": 20, "totalPages": 0})
        if request.url.path == "/api/v1/auth/login":
            return ok({"token": "tok-cli", "user": USER_DATA})
        if request.url.path == "/api/v1/auth/logout":
            return ok()
        return httpx.Response(404, json={"message": "not found"})

    def fake_build_client(settings=None, *, token=None, transport=None):
        return FrextApiClient(
            ClientConfig(base_url=BASE_URL),
            token=token,
            transport=httpx.MockTransport(handler),
        )

    monkeypatch.setattr(cli, "build_client", fake_build_client)
    yield seen
    get_settings.cache_clear()


def test_cli_health(cli_backend, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["health"]) == 0

    out = json.loads(capsys.readouterr().out)
    assert out["success"] is True
    assert out["data"]["status"] == "ok"
    assert "x-request-id" in cli_backend[0].headers


def test_cli_templates(cli_backend, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["templates"]) == 0

    out = json.loads(capsys.readouterr().out)
    assert [t["name"] for t in out["data"]] == ["レシート処理", "請求書処理"]
    assert out["data"][0]["expectedFields"] == ["totalAmount", "date", "vendor"]


def test_cli_process_rejects_unsupported_file(cli_backend, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    doc = tmp_path / "notes.txt"
    doc.write_text("hello", encoding="utf-8")

    assert cli.main(["process", str(doc)]) == 1

    out = json.loads(capsys.readouterr().out)
    assert out["success"] is False
    assert cli_backend == []


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FREXT_API_BASE_URL", "https://frext.example.org")
    monkeypatch.setenv("FREXT_REQUEST_TIMEOUT_SECONDS", "12.5")

    s = Settings()

    assert s.API_BASE_URL == "https://frext.example.org"
    assert s.REQUEST_TIMEOUT_SECONDS == 12.5
    assert s.API_PREFIX == "/api/v1"


def test_log_records_carry_request_id() -> None:
    stream = io.StringIO()
    configure_logging("INFO", stream=stream)

    with request_context("rid-7"):
        logging.getLogger("frext.test").info("hello")
    logging.getLogger("frext.test").info("outside")

    lines = stream.getvalue().splitlines()
    assert "request_id=rid-7 | hello" in lines[0]
    assert "request_id=- | outside" in lines[1]


def test_settings_empty_base_url_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FREXT_API_BASE_URL", "")

    assert Settings().API_BASE_URL == DEFAULT_API_BASE_URL

    monkeypatch.setenv("FREXT_API_BASE_URL", "   ")
    assert Settings().API_BASE_URL == DEFAULT_API_BASE_URL


def test_cli_process_and_export(cli_backend, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    image = tmp_path / "receipt.png"
    image.write_bytes(b"\x89PNG\r\n")
    out_dir = tmp_path / "exports"
    out_dir.mkdir()

    assert cli.main(["process", str(image), "--template-id", "1", "--export", str(out_dir)]) == 0

    out = json.loads(capsys.readouterr().out)
    assert out["success"] is True
    assert out["data"]["fileName"] == "receipt.png"
    assert out["data"]["templateId"] == 1
    assert [r.url.path for r in cli_backend] == ["/api/v1/ocr/process", "/api/v1/gpt/process"]

    exported = Path(out["exportedTo"])
    assert exported.parent == out_dir
    payload = json.loads(exported.read_text(encoding="utf-8"))
    assert payload["template"] == 1
    assert payload["analysis"]["summary"] == GPT_DATA["summary"]


def test_cli_process_missing_file(cli_backend, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["process", str(tmp_path / "missing.png")]) == 1

    out = json.loads(capsys.readouterr().out)
    assert out["success"] is False
    assert "missing.png" in out["error"]
    assert cli_backend == []


def test_cli_history_passes_filters(cli_backend, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["history", "--page", "2", "--status", "completed"]) == 0

    assert dict(cli_backend[0].url.params) == {"page": "2", "limit": "20", "status": "completed"}
    assert json.loads(capsys.readouterr().out)["data"]["page"] == 2


def test_cli_login_token_is_reused_until_logout(cli_backend, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    store = LocalDiskStore(base_dir=tmp_path)

    assert cli.main(["login", "user@example.com", "secret"]) == 0
    assert store.get_item(AUTH_TOKEN_KEY) == "tok-cli"

    assert cli.main(["health"]) == 0
    assert cli_backend[-1].headers["authorization"] == "Bearer tok-cli"

    assert cli.main(["logout"]) == 0
    assert cli_backend[-1].headers["authorization"] == "Bearer tok-cli"
    assert store.get_item(AUTH_TOKEN_KEY) is None

    assert cli.main(["health"]) == 0
    assert "authorization" not in cli_backend[-1].headers
    capsys.readouterr()
