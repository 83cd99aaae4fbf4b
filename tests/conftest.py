from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Tuple

import pytest


_REPO_ROOT = Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if _SRC.exists():
    sys.path.insert(0, str(_SRC))

from report_issue.config import Settings, load_form_schema  # noqa: E402
from report_issue.engine import EventRouter, FormSession, Notifier, SubmissionAssembler, UIRenderer  # noqa: E402
from report_issue.errors import DisplayError  # noqa: E402


class FakeDisplay:
    """Records every display command as (name, args)."""

    def __init__(self, *, fail: bool = False) -> None:
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        self.fail = fail

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if self.fail:
            raise DisplayError(f"{name} failed")

    async def save_panel(self, panel_id, document) -> None:
        self._record("save_panel", panel_id, document)

    async def set_widget_value(self, command) -> None:
        self._record("set_widget_value", command)

    async def show_text_input(self, prompt) -> None:
        self._record("show_text_input", prompt)

    async def show_alert(self, alert) -> None:
        self._record("show_alert", alert)

    async def close_panel(self) -> None:
        self._record("close_panel")

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def of(self, name: str) -> List[Tuple[Any, ...]]:
        return [args for n, args in self.calls if n == name]

    @property
    def alerts(self) -> list:
        return [args[0] for args in self.of("show_alert")]


class FakeStatus:
    """
    Device status with canned answers. A value that is an exception instance is
    raised instead of returned.
    """

    def __init__(self, **overrides: Any) -> None:
        self.values: Dict[str, Any] = {
            "software_name": "ce 11.5.1",
            "serial_number": "FOC1234",
            "product_id": "Cisco Room Kit",
            "device_id": "dev-42",
            "contact_number": "room42@example.test",
            "current_call": None,
            "conference_participants": None,
            "booking_id": None,
        }
        self.values.update(overrides)

    async def _answer(self, name: str) -> Any:
        value = self.values[name]
        if isinstance(value, BaseException):
            raise value
        return value

    async def software_name(self):
        return await self._answer("software_name")

    async def serial_number(self):
        return await self._answer("serial_number")

    async def product_id(self):
        return await self._answer("product_id")

    async def device_id(self):
        return await self._answer("device_id")

    async def contact_number(self):
        return await self._answer("contact_number")

    async def current_call(self):
        return await self._answer("current_call")

    async def conference_participants(self):
        return await self._answer("conference_participants")

    async def booking_id(self):
        return await self._answer("booking_id")


class FakeTransport:
    def __init__(self, response: str = '{"ok": true}', error: Optional[BaseException] = None) -> None:
        self.response = response
        self.error = error
        self.posts: List[Dict[str, Any]] = []

    async def post_json(self, url, body, *, allow_insecure=False) -> str:
        self.posts.append({"url": url, "body": body, "allow_insecure": allow_insecure})
        if self.error is not None:
            raise self.error
        return self.response


def build_stack(schema, display, status, transport, *, show_alert: bool = True, spawn=None) -> SimpleNamespace:
    session = FormSession(schema)
    renderer = UIRenderer(session, display, panel_id="feedback", name="Report Issue")
    notifier = Notifier(display, enabled=show_alert)
    assembler = SubmissionAssembler(
        session,
        status,
        transport,
        notifier,
        service_url="https://hooks.example.test/feedback",
    )
    router = EventRouter(session, renderer, assembler, display, panel_id="feedback", name="Report Issue", spawn=spawn)
    return SimpleNamespace(session=session, renderer=renderer, notifier=notifier, assembler=assembler, router=router)


@pytest.fixture
def schema():
    return load_form_schema()


@pytest.fixture
def display():
    return FakeDisplay()


@pytest.fixture
def status():
    return FakeStatus()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def settings():
    return Settings(service_url="https://hooks.example.test/feedback")


@pytest.fixture
def stack(schema, display, status, transport):
    return build_stack(schema, display, status, transport)
