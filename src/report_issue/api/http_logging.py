from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Any, Dict, Iterable, List, Optional, Tuple

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from report_issue.utils import env_bool, env_int

logger = logging.getLogger("report_issue.http")


_SENSITIVE_KEYS = {
    "authorization",
    "cookie",
    "x-api-key",
    "password",
    "token",
    "secret",
}


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: ("***" if str(k).lower() in _SENSITIVE_KEYS else _redact(v)) for k, v in value.items()}
    if isinstance(value, list):
        return [_redact(v) for v in value]
    return value


def _header(headers: Iterable[Tuple[bytes, bytes]], name: bytes) -> Optional[str]:
    for k, v in headers:
        if k.lower() == name:
            return v.decode("latin-1", errors="replace")
    return None


def _body_for_log(raw: bytes, truncated: bool) -> Any:
    text = raw.decode("utf-8", errors="replace")
    if truncated:
        return text
    try:
        return _redact(json.loads(text))
    except ValueError:
        return text


class HttpLoggingMiddleware:
    """
    One JSON log line per HTTP request: method, path, status, duration and the
    (redacted, size-capped) request body. Device feedback bodies are small, so
    the request side is what is worth keeping.
    """

    def __init__(self, app: ASGIApp, *, max_body_bytes: int) -> None:
        self.app = app
        self.max_body_bytes = max(0, max_body_bytes)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        started_at = time.perf_counter()
        headers: List[Tuple[bytes, bytes]] = list(scope.get("headers") or [])
        request_id = _header(headers, b"x-request-id") or uuid.uuid4().hex[:12]
        body = bytearray()
        truncated = False
        status: Optional[int] = None

        async def receive_wrapped() -> Message:
            nonlocal truncated
            message = await receive()
            if message.get("type") == "http.request" and self.max_body_bytes:
                chunk = message.get("body") or b""
                room = self.max_body_bytes - len(body)
                if room > 0:
                    body.extend(chunk[:room])
                if len(chunk) > room:
                    truncated = True
            return message

        async def send_wrapped(message: Message) -> None:
            nonlocal status
            if message.get("type") == "http.response.start":
                status = int(message.get("status") or 0)
            await send(message)

        error: Optional[BaseException] = None
        try:
            await self.app(scope, receive_wrapped, send_wrapped)
        except BaseException as e:  # noqa: BLE001 - logged, then re-raised
            error = e
            raise
        finally:
            record: Dict[str, Any] = {
                "id": request_id,
                "method": str(scope.get("method") or "").upper(),
                "path": str(scope.get("path") or ""),
                "status": status,
                "dur_ms": int((time.perf_counter() - started_at) * 1000),
            }
            if self.max_body_bytes:
                record["body"] = _body_for_log(bytes(body), truncated)
                record["body_truncated"] = truncated
            if error is not None:
                record["error"] = {"type": type(error).__name__, "message": str(error)}
            logger.info(json.dumps(record, ensure_ascii=False, separators=(",", ":"), default=str))


def install_http_logging(app: Any) -> None:
    """
    Enable request logging via env vars.

    - `REPORT_ISSUE_HTTP_LOG=1` enables the middleware
    - `REPORT_ISSUE_HTTP_LOG_BODY_MAX_BYTES=4096` caps captured body bytes (0 = no body)
    """
    if not env_bool("REPORT_ISSUE_HTTP_LOG", default=False):
        return
    max_body_bytes = env_int("REPORT_ISSUE_HTTP_LOG_BODY_MAX_BYTES", default=4096)
    app.add_middleware(HttpLoggingMiddleware, max_body_bytes=max_body_bytes)
