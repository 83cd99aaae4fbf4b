"""
Submission assembler.

On submit: show a "sending" notice, snapshot the session, fetch booking/call/
conference context concurrently, merge with whatever identification has
resolved, and POST the result to the webhook. Outcomes are reported as device
notices; nothing here raises to the caller.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

import anyio

from report_issue.adapters.base import DisplaySurface, StatusProvider, Transport
from report_issue.engine.session import FormSession
from report_issue.errors import TransportError
from report_issue.schemas.ui import Alert

logger = logging.getLogger(__name__)

SUCCESS_TEXT = "Feedback sent, please wait for an agent to process"


class Notifier:
    """
    Logs every notice; shows it on the device when alerts are enabled or an
    explicit duration is given.
    """

    def __init__(self, display: DisplaySurface, *, enabled: bool) -> None:
        self.display = display
        self.enabled = enabled

    async def notify(self, title: str, message: str, duration: Optional[int] = None) -> None:
        logger.info("%s: %s", title, message)
        if not self.enabled and duration is None:
            return
        alert = Alert(title=title, text=message, duration=3 if duration is None else duration)
        try:
            await self.display.show_alert(alert)
        except Exception as exc:  # noqa: BLE001 - notices are best-effort
            logger.warning("Could not display alert '%s': %s", title, exc)


@dataclass(frozen=True)
class SubmissionPayload:
    values: Dict[str, str]
    identification: Dict[str, str]
    booking_id: Optional[str] = None
    call_details: Optional[Dict[str, Any]] = None
    conference_details: Optional[List[Dict[str, Any]]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.values,
            "identification": dict(self.identification),
            "bookingId": self.booking_id,
            "callDetails": self.call_details,
            "conferenceDetails": self.conference_details,
        }


@dataclass
class SubmissionResult:
    ok: bool
    payload: SubmissionPayload
    response: Any = None
    error: Optional[Dict[str, Any]] = field(default=None)


class SubmissionAssembler:
    def __init__(
        self,
        session: FormSession,
        status: StatusProvider,
        transport: Transport,
        notifier: Notifier,
        *,
        service_url: str,
        allow_insecure: bool = False,
        waiting_text: str = "Sending Feedback",
    ) -> None:
        self.session = session
        self.status = status
        self.transport = transport
        self.notifier = notifier
        self.service_url = service_url
        self.allow_insecure = allow_insecure
        self.waiting_text = waiting_text

    async def submit(self, values: Optional[Dict[str, str]] = None) -> SubmissionResult:
        """Send `values` (default: the current session) with device context."""
        values = dict(values) if values is not None else self.session.snapshot()
        # With alerts on, the sending notice stays up until success/error replaces it.
        await self.notifier.notify("Sending", self.waiting_text, 0 if self.notifier.enabled else 10)

        context = await self.fetch_context()
        payload = SubmissionPayload(
            values=values,
            identification=self.session.identification.to_payload(),
            booking_id=context["bookingId"],
            call_details=context["callDetails"],
            conference_details=context["conferenceDetails"],
        )
        body = payload.to_dict()
        logger.info("Submitting feedback: %s", json.dumps(body, ensure_ascii=False))

        try:
            raw = await self.transport.post_json(self.service_url, body, allow_insecure=self.allow_insecure)
        except Exception as exc:  # noqa: BLE001 - surfaced as a device notice
            error = exc.to_dict() if isinstance(exc, TransportError) else {"type": type(exc).__name__, "message": str(exc)}
            await self.notifier.notify("Error", json.dumps(error, ensure_ascii=False))
            return SubmissionResult(ok=False, payload=payload, error=error)

        # An unparseable body still counts as success (matches the device macro).
        response = _parse_json(raw)
        await self.notifier.notify("Success", SUCCESS_TEXT, 10)
        return SubmissionResult(ok=True, payload=payload, response=response)

    async def fetch_context(self) -> Dict[str, Any]:
        """Booking, call and conference context; each slot is None on failure or absence."""
        out: Dict[str, Any] = {"bookingId": None, "callDetails": None, "conferenceDetails": None}

        async def grab(key: str, fetch: Callable[[], Awaitable[Any]]) -> None:
            try:
                out[key] = await fetch()
            except Exception as exc:  # noqa: BLE001 - context is best-effort
                logger.warning("Could not get %s: %s", key, exc)

        async with anyio.create_task_group() as tg:
            tg.start_soon(grab, "bookingId", self._booking_id)
            tg.start_soon(grab, "callDetails", self._call_details)
            tg.start_soon(grab, "conferenceDetails", self._conference_details)
        return out

    async def _booking_id(self) -> Optional[str]:
        result = await self.status.booking_id()
        booking = result or None
        logger.info("Current Booking Id: %s", booking)
        return booking

    async def _call_details(self) -> Optional[Dict[str, Any]]:
        call = await self.status.current_call()
        logger.info("Current CallId: %s", (call or {}).get("id"))
        return call or None

    async def _conference_details(self) -> Optional[List[Dict[str, Any]]]:
        participants = await self.status.conference_participants()
        return participants or None


def _parse_json(text: Optional[str]) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        logger.debug("Webhook response is not JSON")
        return None
