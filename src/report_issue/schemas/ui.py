"""
Declarative UI models sent to the display surface.

A panel document is Panel -> Page -> Row -> Widget. `PanelDocument.to_xml()`
renders the device's UI extension XML; the models themselves stay
transport-agnostic so fakes and the session endpoint can inspect them.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Widget(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    widget_id: str = Field(..., alias="widgetId")
    name: str
    type: Literal["Text", "Button"]
    options: str = ""


class Row(BaseModel):
    model_config = ConfigDict(frozen=True)

    widgets: List[Widget] = Field(default_factory=list)


class Page(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    rows: List[Row] = Field(default_factory=list)
    options: str = "hideRowNames=1"


class PanelDocument(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    location: str = "HomeScreenAndCallControls"
    type: str = "Statusbar"
    icon: str = "Helpdesk"
    color: str = "#0067ac"
    activity_type: str = Field(default="Custom", alias="activityType")
    page: Page

    def widget_ids(self) -> List[str]:
        return [w.widget_id for row in self.page.rows for w in row.widgets]

    def find(self, widget_id: str) -> Optional[Widget]:
        for row in self.page.rows:
            for widget in row.widgets:
                if widget.widget_id == widget_id:
                    return widget
        return None

    def to_xml(self) -> str:
        root = ET.Element("Extensions")
        panel = ET.SubElement(root, "Panel")
        _text(panel, "Location", self.location)
        _text(panel, "Type", self.type)
        _text(panel, "Icon", self.icon)
        _text(panel, "Name", self.name)
        _text(panel, "Color", self.color)
        _text(panel, "ActivityType", self.activity_type)
        page = ET.SubElement(panel, "Page")
        _text(page, "Name", self.page.name)
        for row in self.page.rows:
            row_el = ET.SubElement(page, "Row")
            for widget in row.widgets:
                w = ET.SubElement(row_el, "Widget")
                _text(w, "WidgetId", widget.widget_id)
                _text(w, "Name", widget.name)
                _text(w, "Type", widget.type)
                _text(w, "Options", widget.options)
        _text(page, "Options", self.page.options)
        return ET.tostring(root, encoding="unicode")


def _text(parent: ET.Element, tag: str, value: str) -> None:
    ET.SubElement(parent, tag).text = value


class WidgetValue(BaseModel):
    """Out-of-band `set widget value` command (e.g. lighting up the submit button)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    widget_id: str = Field(..., alias="widgetId")
    value: str


class TextInputPrompt(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    feedback_id: str = Field(..., alias="feedbackId")
    input_type: str = Field(default="SingleLine", alias="inputType")
    placeholder: str = ""
    text: str = ""
    title: str = ""
    input_text: Optional[str] = Field(default=None, alias="inputText")


class Alert(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    text: str
    # 0 keeps the alert up until it is replaced or dismissed.
    duration: int = 3
