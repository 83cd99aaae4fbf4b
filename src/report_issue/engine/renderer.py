"""
UI renderer.

Two modes:
  - start: a prompt row plus one `option<i>` button row per start option
  - form:  one row per eligible field, in schema order

Each render replaces the whole panel document on the display surface, then
pushes `set widget value` commands for rendered fields that carry an activation
value. Display errors are logged and dropped; the next render repairs the UI.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from report_issue.adapters.base import DisplaySurface
from report_issue.engine.resolver import DependencyResolver
from report_issue.engine.session import FormMode, FormSession
from report_issue.schemas.form import ButtonVariant, FieldSpec, TextVariant, label_for
from report_issue.schemas.ui import Page, PanelDocument, Row, Widget, WidgetValue
from report_issue.utils import best_effort

logger = logging.getLogger(__name__)

OPTION_PREFIX = "option"
START_PROMPT_ID = "category-text"


def option_id(index: int) -> str:
    return f"{OPTION_PREFIX}{index}"


def parse_option_id(widget_id: str) -> Optional[int]:
    """`option12` -> 12; anything else -> None."""
    if not widget_id.startswith(OPTION_PREFIX):
        return None
    suffix = widget_id[len(OPTION_PREFIX):]
    if not suffix.isdigit():
        return None
    return int(suffix)


class UIRenderer:
    def __init__(self, session: FormSession, display: DisplaySurface, *, panel_id: str, name: str) -> None:
        self.session = session
        self.display = display
        self.panel_id = panel_id
        self.name = name
        self.resolver = DependencyResolver(session)
        self.last_document: Optional[PanelDocument] = None

    # ------------------------------------------------------------------
    # Document building (pure)
    # ------------------------------------------------------------------

    def build_start(self) -> PanelDocument:
        start = self.session.schema.start
        rows = [Row(widgets=[Widget(widget_id=START_PROMPT_ID, name=start.prompt, type="Text", options=start.prompt_options)])]
        for i, option in enumerate(start.options):
            rows.append(Row(widgets=[Widget(widget_id=option_id(i), name=option, type="Button", options=start.option_options)]))
        return self._document(rows)

    def build_form(self) -> Tuple[PanelDocument, List[WidgetValue]]:
        rows: List[Row] = []
        activations: List[WidgetValue] = []
        for spec in self.resolver.eligible_fields():
            logger.debug("Field [%s] requires %s | current inputs: %s", spec.key, list(spec.requires), list(self.session.values))
            rows.append(Row(widgets=self._widgets(spec)))
            if spec.value is not None:
                activations.append(WidgetValue(widget_id=spec.key, value=spec.value))
        return self._document(rows), activations

    def _widgets(self, spec: FieldSpec) -> List[Widget]:
        value = self.session.get(spec.key)
        has_value = self.session.has(spec.key)
        out: List[Widget] = []
        for variant in spec.variants:
            if isinstance(variant, ButtonVariant):
                out.append(Widget(widget_id=spec.key, name=label_for(spec, has_value), type="Button", options=variant.options))
            elif isinstance(variant, TextVariant) and (has_value or spec.show_placeholder):
                text = _display_text(variant.prefix, value) if has_value else spec.placeholder
                out.append(Widget(widget_id=spec.text_id, name=text, type="Text", options=variant.options))
        return out

    def _document(self, rows: List[Row]) -> PanelDocument:
        look = self.session.schema.panel
        return PanelDocument(
            name=self.name,
            location=look.location,
            type=look.type,
            icon=look.icon,
            color=look.color,
            activity_type=look.activity_type,
            page=Page(name=self.name, rows=rows),
        )

    # ------------------------------------------------------------------
    # Rendering (pushes to the display)
    # ------------------------------------------------------------------

    async def render_start(self) -> PanelDocument:
        self.session.mode = FormMode.START
        document = self.build_start()
        await self._push(document, [])
        return document

    async def render_form(self) -> PanelDocument:
        self.session.mode = FormMode.FORM
        document, activations = self.build_form()
        await self._push(document, activations)
        return document

    async def _push(self, document: PanelDocument, activations: List[WidgetValue]) -> None:
        self.last_document = document
        await best_effort(self.display.save_panel(self.panel_id, document), f"save panel {self.panel_id}")
        for command in activations:
            logger.info("Key: %s | Value: %s", command.widget_id, command.value)
            await best_effort(self.display.set_widget_value(command), f"set value of {command.widget_id}")


def _display_text(prefix: str, value: Optional[str]) -> str:
    value = value or ""
    return f"{prefix} {value}" if prefix else value
