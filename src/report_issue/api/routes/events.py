from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Dict

from fastapi import APIRouter, Body, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY

from report_issue.schemas.events import events_from_feedback, parse_event
from report_issue.service import FormService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])


def _service(request: Request) -> FormService:
    return request.app.state.service


def _validation_error(exc: ValidationError, path: str) -> JSONResponse:
    request_id = f"val_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"
    logger.info("422 validation_error requestId=%s path=%s errors=%s", request_id, path, exc.errors())
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "ok": False,
            "error": "validation_error",
            "message": "Request body did not match expected schema.",
            "requestId": request_id,
            "details": exc.errors(include_url=False, include_context=False),
        },
    )


@router.post("/feedback")
async def device_feedback(request: Request, body: Any = Body(default=None)) -> Any:
    """
    HttpFeedback target registered on the device.

    Only UserInterface panel/widget/text-input events are queued; everything
    else the device sends is acknowledged and dropped.
    """
    try:
        events = events_from_feedback(body)
    except ValidationError as exc:
        return _validation_error(exc, "/v1/feedback")

    service = _service(request)
    for event in events:
        await service.enqueue(event)
    return {"ok": True, "queued": len(events)}


@router.post("/events")
async def post_event(request: Request, payload: Dict[str, Any] = Body(...)) -> Any:
    """Queue one event in flat form, e.g. `{"kind": "widget_action", "WidgetId": "option2", "Type": "clicked"}`."""
    try:
        event = parse_event(payload)
    except ValidationError as exc:
        return _validation_error(exc, "/v1/events")

    await _service(request).enqueue(event)
    return {"ok": True, "queued": 1}


@router.get("/session")
async def session_state(request: Request) -> Dict[str, Any]:
    return {"ok": True, **_service(request).snapshot()}
