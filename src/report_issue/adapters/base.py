"""
Collaborator interfaces the form engine talks to.

Concrete adapters live next to this module (`display`, `status`,
`webhook`); tests substitute in-memory fakes.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from report_issue.schemas.ui import Alert, PanelDocument, TextInputPrompt, WidgetValue


class DisplaySurface(Protocol):
    async def save_panel(self, panel_id: str, document: PanelDocument) -> None: ...

    async def set_widget_value(self, command: WidgetValue) -> None: ...

    async def show_text_input(self, prompt: TextInputPrompt) -> None: ...

    async def show_alert(self, alert: Alert) -> None: ...

    async def close_panel(self) -> None: ...


class StatusProvider(Protocol):
    async def software_name(self) -> str: ...

    async def serial_number(self) -> str: ...

    async def product_id(self) -> str: ...

    async def device_id(self) -> str: ...

    async def contact_number(self) -> str: ...

    async def current_call(self) -> Optional[Dict[str, Any]]: ...

    async def conference_participants(self) -> Optional[List[Dict[str, Any]]]: ...

    async def booking_id(self) -> Optional[str]: ...


class Transport(Protocol):
    async def post_json(self, url: str, body: Dict[str, Any], *, allow_insecure: bool = False) -> str: ...
