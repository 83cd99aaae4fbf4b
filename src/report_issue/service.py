"""
Form service: wires session, renderer, router and submission together and runs
the single ordered event loop.

Events are queued on an anyio memory stream and handled one at a time by one
consumer task, in arrival order. Submissions and the startup identity lookups
run detached in the service task group.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import anyio
from anyio.abc import TaskGroup, TaskStatus

from report_issue.adapters.base import DisplaySurface, StatusProvider, Transport
from report_issue.adapters.display import XapiDisplay
from report_issue.adapters.status import XapiStatus
from report_issue.adapters.webhook import WebhookTransport
from report_issue.adapters.xapi import XapiClient
from report_issue.config import Settings
from report_issue.engine.renderer import UIRenderer
from report_issue.engine.router import Event, EventRouter
from report_issue.engine.session import FormSession
from report_issue.engine.submission import Notifier, SubmissionAssembler
from report_issue.schemas.form import FormSchema

logger = logging.getLogger(__name__)

QUEUE_SIZE = 100


class FormService:
    def __init__(
        self,
        settings: Settings,
        schema: FormSchema,
        *,
        display: DisplaySurface,
        status: StatusProvider,
        transport: Transport,
        client: Optional[XapiClient] = None,
    ) -> None:
        self.settings = settings
        # Owned device connection, closed by `aclose()`.
        self.client = client
        self.display = display
        self.status = status
        self.session = FormSession(schema)
        self.renderer = UIRenderer(self.session, display, panel_id=settings.panel_id, name=settings.name)
        self.notifier = Notifier(display, enabled=settings.show_alert)
        self.assembler = SubmissionAssembler(
            self.session,
            status,
            transport,
            self.notifier,
            service_url=settings.service_url,
            allow_insecure=settings.allow_insecure_https,
            waiting_text=settings.waiting_text,
        )
        self.router = EventRouter(
            self.session,
            self.renderer,
            self.assembler,
            display,
            panel_id=settings.panel_id,
            name=settings.name,
        )
        self._send, self._receive = anyio.create_memory_object_stream[Event](max_buffer_size=QUEUE_SIZE)
        self.processed = 0

    async def run(self, *, task_status: TaskStatus[None] = anyio.TASK_STATUS_IGNORED) -> None:
        """Start identity lookups, create the panel, then consume events until `close()`."""
        async with anyio.create_task_group() as tg:
            self.router.spawn = tg.start_soon
            self.start_identification(tg)
            await self.renderer.render_form()
            task_status.started()
            async with self._receive:
                async for event in self._receive:
                    await self.handle(event)
            logger.info("Event stream closed after %d events", self.processed)

    async def handle(self, event: Event) -> None:
        try:
            await self.router.handle(event)
        except Exception:  # noqa: BLE001 - the loop must stay ready for the next event
            logger.exception("Unhandled error while processing %s", type(event).__name__)
        finally:
            self.processed += 1

    async def enqueue(self, event: Event) -> None:
        await self._send.send(event)

    async def close(self) -> None:
        await self._send.aclose()

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            logger.info("Device connection closed")

    def start_identification(self, tg: TaskGroup) -> None:
        lookups: Dict[str, Callable[[], Awaitable[str]]] = {
            "software": self.status.software_name,
            "serial_number": self.status.serial_number,
            "product_id": self.status.product_id,
            "device_id": self.status.device_id,
            "contact_number": self.status.contact_number,
        }
        for slot, fetch in lookups.items():
            tg.start_soon(self._identify, slot, fetch)

    async def _identify(self, slot: str, fetch: Callable[[], Awaitable[str]]) -> None:
        try:
            value = await fetch()
        except Exception as exc:  # noqa: BLE001 - identity is best-effort
            logger.info("Could not get %s: %s", slot, exc)
            return
        setattr(self.session.identification, slot, value)

    def snapshot(self) -> Dict[str, Any]:
        document = self.renderer.last_document
        last = self.router.last_submission
        out: Dict[str, Any] = {
            "panelId": self.settings.panel_id,
            "mode": self.session.mode.value,
            "values": self.session.snapshot(),
            "identification": self.session.identification.to_payload(),
            "widgets": document.widget_ids() if document is not None else [],
            "processed": self.processed,
        }
        if last is not None:
            out["lastSubmission"] = {"ok": last.ok, "error": last.error}
        return out


def build_service(settings: Settings, schema: FormSchema, *, client: Optional[XapiClient] = None) -> FormService:
    """Service wired to a real device over xAPI and the httpx webhook transport."""
    xapi = client or XapiClient(
        settings.device_host,
        username=settings.device_username,
        password=settings.device_password,
        verify=settings.device_verify_tls,
    )
    return FormService(
        settings,
        schema,
        display=XapiDisplay(xapi),
        status=XapiStatus(xapi),
        transport=WebhookTransport(),
        client=xapi,
    )
