"""Command-line access to the frext API.

    frext health
    frext templates
    frext process receipt.jpg --template-id 1 --export ./results
    frext history --page 2 --limit 10
    frext login user@example.com secret
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from frext.application import operations
from frext.application.auth import AuthApi
from frext.application.services.factories import build_client, build_local_store
from frext.application.usecases.process_upload import ResultViewer, UploadWorkflow
from frext.core.config import Settings, get_settings
from frext.core.logging import configure_logging, request_context
from frext.domain.constants import AUTH_TOKEN_KEY
from frext.domain.errors import StorageError
from frext.domain.models import ApiResponse, HistoryFilters, UploadFile
from frext.infrastructure.clients.api_http import FrextApiClient
from frext.infrastructure.storage.memory_adapter import MemoryStore


def _print_json(obj: Any) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=2))


def _emit(response: ApiResponse[Any]) -> int:
    _print_json(response.to_wire())
    return 0 if response.success else 1


def _stored_token(settings: Settings) -> str | None:
    try:
        return build_local_store(settings).get_item(AUTH_TOKEN_KEY)
    except StorageError:
        return None


async def _health(client: FrextApiClient, args: argparse.Namespace) -> int:
    return _emit(await client.health_check())


async def _templates(client: FrextApiClient, args: argparse.Namespace) -> int:
    return _emit(await operations.get_templates(client))


async def _history(client: FrextApiClient, args: argparse.Namespace) -> int:
    filters = HistoryFilters(template_id=args.template_id, status=args.status)
    return _emit(await operations.get_processing_history(client, args.page, args.limit, filters))


async def _process(client: FrextApiClient, args: argparse.Namespace) -> int:
    session = MemoryStore()
    workflow = UploadWorkflow(client, session, max_upload_bytes=get_settings().MAX_UPLOAD_BYTES)
    workflow.select_template(args.template_id)
    try:
        upload = UploadFile.from_path(args.file)
    except OSError as e:
        _print_json({"success": False, "error": f"{args.file}: {e.strerror or e}"})
        return 1
    if not workflow.select_file(upload):
        _print_json({"success": False, "error": workflow.state.error})
        return 1
    stored = await workflow.process()
    if stored is None:
        _print_json({"success": False, "error": workflow.state.error})
        return 1
    out: dict[str, Any] = {"success": True, "data": stored.to_wire()}
    if args.export is not None:
        viewer = ResultViewer(client, session)
        viewer.load()
        path = viewer.export(args.export)
        if path is None:
            _print_json({"success": False, "error": viewer.state.error})
            return 1
        out["exportedTo"] = str(path)
    _print_json(out)
    return 0


async def _login(client: FrextApiClient, args: argparse.Namespace) -> int:
    auth = AuthApi(client, build_local_store())
    return _emit(await auth.login(args.email, args.password))


async def _logout(client: FrextApiClient, args: argparse.Namespace) -> int:
    auth = AuthApi(client, build_local_store())
    return _emit(await auth.logout())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="frext", description="frext OCR + AI API client")
    parser.add_argument("--base-url", type=str, default=None, help="Backend base URL (overrides FREXT_API_BASE_URL)")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (default from FREXT_LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("health", help="Check backend health").set_defaults(handler=_health)
    sub.add_parser("templates", help="List processing templates").set_defaults(handler=_templates)

    p_process = sub.add_parser("process", help="Run OCR + GPT on an image")
    p_process.add_argument("file", type=Path, help="Image to upload (jpeg, png, webp, heic)")
    p_process.add_argument("--template-id", type=int, default=None)
    p_process.add_argument("--export", type=Path, default=None, help="Also write the result as JSON to this file or directory")
    p_process.set_defaults(handler=_process)

    p_history = sub.add_parser("history", help="Show processing history")
    p_history.add_argument("--page", type=int, default=1)
    p_history.add_argument("--limit", type=int, default=20)
    p_history.add_argument("--template-id", type=int, default=None)
    p_history.add_argument("--status", type=str, default=None)
    p_history.set_defaults(handler=_history)

    p_login = sub.add_parser("login", help="Log in and store the token")
    p_login.add_argument("email", type=str)
    p_login.add_argument("password", type=str)
    p_login.set_defaults(handler=_login)

    sub.add_parser("logout", help="Log out and forget the stored token").set_defaults(handler=_logout)
    return parser


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    if args.base_url:
        settings = settings.model_copy(update={"API_BASE_URL": args.base_url})
    client = build_client(settings, token=_stored_token(settings))
    with request_context():
        return await args.handler(client, args)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()
    configure_logging(args.log_level or settings.LOG_LEVEL, stream=sys.stderr)
    return asyncio.run(_run(args, settings))


if __name__ == "__main__":
    sys.exit(main())
