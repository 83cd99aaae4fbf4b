"""
Minimal async client for a room device's HTTP xAPI.

- Commands: POST `/putxml` with a `<Command>` document. Multiline commands (panel
  save) carry their payload in a `<body>` element.
- Status:   GET `/getxml?location=/Status/...` returning the status subtree.

Basic auth against a local integrator account. Certificate checks can be turned
off for devices with self-signed certificates.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional, Sequence

import httpx

from report_issue.errors import DisplayError

logger = logging.getLogger(__name__)


def build_command(path: Sequence[str], params: Optional[Dict[str, Any]] = None, body: Optional[str] = None) -> str:
    """
    `build_command(["UserInterface", "Extensions", "Panel", "Close"])` ->
    `<Command><UserInterface><Extensions><Panel><Close /></Panel>...`
    """
    root = ET.Element("Command")
    node = root
    for part in path:
        node = ET.SubElement(node, part)
    for key, value in (params or {}).items():
        if value is None:
            continue
        ET.SubElement(node, key).text = str(value)
    if body is not None:
        ET.SubElement(node, "body").text = body
    return ET.tostring(root, encoding="unicode")


def element_to_value(element: ET.Element) -> Any:
    """Leaf -> text; branch -> dict (repeated tags become lists, `item` becomes `id`)."""
    children = list(element)
    if not children:
        return (element.text or "").strip()
    out: Dict[str, Any] = {}
    if "item" in element.attrib:
        out["id"] = element.attrib["item"]
    for child in children:
        value = element_to_value(child)
        if child.tag in out:
            existing = out[child.tag]
            if not isinstance(existing, list):
                out[child.tag] = [existing]
            out[child.tag].append(value)
        else:
            out[child.tag] = value
    return out


class XapiClient:
    def __init__(
        self,
        host: str,
        *,
        username: str = "",
        password: str = "",
        verify: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        base_url = host if host.startswith("http") else f"https://{host}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            auth=(username, password) if username else None,
            verify=verify,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    async def command(self, path: Sequence[str], params: Optional[Dict[str, Any]] = None, body: Optional[str] = None) -> ET.Element:
        xml = build_command(path, params, body)
        name = "/".join(path)
        logger.debug("xCommand %s %s", name, params or {})
        try:
            resp = await self._client.post("/putxml", content=xml, headers={"Content-Type": "text/xml"})
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise DisplayError(f"{name}: {exc}") from exc

        try:
            result = ET.fromstring(resp.text)
        except ET.ParseError as exc:
            raise DisplayError(f"{name}: unreadable response") from exc
        for node in result.iter():
            if node.attrib.get("status", "").lower() == "error":
                reason = node.findtext("Reason") or "error"
                raise DisplayError(f"{name}: {reason}")
        return result

    async def status(self, path: Sequence[str]) -> List[ET.Element]:
        """Elements at `/Status/<path>`; empty when the device has no such node."""
        location = "/Status/" + "/".join(path)
        resp = await self._client.get("/getxml", params={"location": location})
        resp.raise_for_status()
        root = ET.fromstring(resp.text)
        return root.findall("/".join(path))
