"""
Status provider backed by xAPI `getxml` reads.

Identity reads return the leaf text (raising when the node is missing, so the
caller logs it and leaves the slot empty). Context reads return None when
there is no active call, conference or booking.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from report_issue.adapters.xapi import XapiClient, element_to_value


class XapiStatus:
    def __init__(self, client: XapiClient) -> None:
        self.client = client

    async def _leaf(self, path: Sequence[str]) -> str:
        nodes = await self.client.status(path)
        if not nodes:
            raise LookupError(f"No status at /Status/{'/'.join(path)}")
        return (nodes[0].text or "").strip()

    async def software_name(self) -> str:
        return await self._leaf(["SystemUnit", "Software", "DisplayName"])

    async def serial_number(self) -> str:
        return await self._leaf(["SystemUnit", "Hardware", "Module", "SerialNumber"])

    async def product_id(self) -> str:
        return await self._leaf(["SystemUnit", "ProductId"])

    async def device_id(self) -> str:
        return await self._leaf(["Webex", "DeveloperId"])

    async def contact_number(self) -> str:
        methods = await self.client.status(["UserInterface", "ContactInfo", "ContactMethod"])
        for method in methods:
            if method.attrib.get("item") == "1":
                return (method.findtext("Number") or "").strip()
        raise LookupError("No primary contact method")

    async def current_call(self) -> Optional[Dict[str, Any]]:
        calls = await self.client.status(["Call"])
        if not calls:
            return None
        return element_to_value(calls[0])

    async def conference_participants(self) -> Optional[List[Dict[str, Any]]]:
        calls = await self.client.status(["Conference", "Call"])
        if not calls:
            return None
        return [element_to_value(c) for c in calls]

    async def booking_id(self) -> Optional[str]:
        nodes = await self.client.status(["Bookings", "Current", "Id"])
        if not nodes:
            return None
        return (nodes[0].text or "").strip() or None
