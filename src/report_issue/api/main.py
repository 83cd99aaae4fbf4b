from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import anyio
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY, HTTP_500_INTERNAL_SERVER_ERROR

from report_issue import __version__
from report_issue.api.http_logging import install_http_logging
from report_issue.api.routes.events import router as events_router
from report_issue.api.routes.health import router as health_router
from report_issue.config import configure_logging, load_form_schema, load_settings
from report_issue.service import FormService, build_service

logger = logging.getLogger(__name__)


def create_app(service: Optional[FormService] = None) -> FastAPI:
    """
    Build the API.

    Without an explicit `service`, settings and the form schema are loaded from
    the environment and the service talks to the configured device over xAPI.
    """
    if service is None:
        settings = load_settings()
        configure_logging(settings.log_level)
        service = build_service(settings, load_form_schema(settings.form_path))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            async with anyio.create_task_group() as tg:
                await tg.start(service.run)
                logger.info("Form service started (panel=%s)", service.settings.panel_id)
                yield
                await service.close()
                tg.cancel_scope.cancel()
        finally:
            await service.aclose()

    app = FastAPI(title="report-issue-service", version=__version__, lifespan=lifespan)
    app.state.service = service
    install_http_logging(app)

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        request_id = f"val_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"
        logger.info("422 validation_error requestId=%s path=%s errors=%s", request_id, request.url.path, exc.errors())
        return JSONResponse(
            status_code=HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "ok": False,
                "error": "validation_error",
                "message": "Request body did not match expected schema.",
                "requestId": request_id,
                "details": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = f"err_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"
        logger.error("500 internal_error requestId=%s path=%s err=%r", request_id, request.url.path, exc)
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "ok": False,
                "error": "internal_error",
                "message": "Unhandled server error.",
                "requestId": request_id,
            },
        )

    # Unversioned health is convenient for deployments and uptime checks.
    app.include_router(health_router)
    app.include_router(events_router, prefix="/v1")
    return app
