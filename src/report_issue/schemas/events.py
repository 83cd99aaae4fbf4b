"""
UI events emitted by the display surface.

Field aliases use the device's own names (`PanelId`, `WidgetId`, `FeedbackId`, ...)
so HTTP feedback bodies validate directly; snake_case names are accepted too.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter


class PanelOpened(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    kind: Literal["panel_opened"] = "panel_opened"
    panel_id: str = Field(..., validation_alias=AliasChoices("panel_id", "PanelId", "panelId"))


class WidgetAction(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    kind: Literal["widget_action"] = "widget_action"
    widget_id: str = Field(..., validation_alias=AliasChoices("widget_id", "WidgetId", "widgetId"))
    type: str = Field(..., validation_alias=AliasChoices("type", "Type"))
    value: Optional[str] = Field(default=None, validation_alias=AliasChoices("value", "Value"))


class TextSubmitted(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    kind: Literal["text_submitted"] = "text_submitted"
    feedback_id: str = Field(..., validation_alias=AliasChoices("feedback_id", "FeedbackId", "feedbackId"))
    text: str = Field(default="", validation_alias=AliasChoices("text", "Text"))


UIEvent = Annotated[Union[PanelOpened, WidgetAction, TextSubmitted], Field(discriminator="kind")]

_EVENT_ADAPTER: TypeAdapter[Any] = TypeAdapter(UIEvent)


def parse_event(data: Dict[str, Any]) -> Union[PanelOpened, WidgetAction, TextSubmitted]:
    """Validate a flat event body (`{"kind": "widget_action", "WidgetId": ..., ...}`)."""
    return _EVENT_ADAPTER.validate_python(data)


def _unwrap(node: Any) -> Any:
    # HttpFeedback JSON wraps leaves as {"Value": "..."} (sometimes with an "id").
    if isinstance(node, dict):
        if "Value" in node and all(k in {"Value", "id"} for k in node):
            return node["Value"]
        return {k: _unwrap(v) for k, v in node.items()}
    if isinstance(node, list):
        return [_unwrap(v) for v in node]
    return node


def events_from_feedback(body: Any) -> list:
    """
    Extract UI events from a device HttpFeedback JSON body.

    Recognized paths under `Event.UserInterface`:
      - `Extensions.Panel.Clicked`   -> PanelOpened
      - `Extensions.Widget.Action`   -> WidgetAction
      - `Message.TextInput.Response` -> TextSubmitted

    Anything else (status feedback, other events) yields no events.
    """
    if not isinstance(body, dict):
        return []
    event = _unwrap(body.get("Event") or {})
    ui = event.get("UserInterface") if isinstance(event, dict) else None
    if not isinstance(ui, dict):
        return []

    out: list = []
    extensions = ui.get("Extensions") if isinstance(ui.get("Extensions"), dict) else {}
    panel = extensions.get("Panel") if isinstance(extensions.get("Panel"), dict) else {}
    clicked = panel.get("Clicked")
    if isinstance(clicked, dict):
        out.append(PanelOpened.model_validate(clicked))

    widget = extensions.get("Widget") if isinstance(extensions.get("Widget"), dict) else {}
    action = widget.get("Action")
    if isinstance(action, dict):
        out.append(WidgetAction.model_validate(action))

    message = ui.get("Message") if isinstance(ui.get("Message"), dict) else {}
    text_input = message.get("TextInput") if isinstance(message.get("TextInput"), dict) else {}
    response = text_input.get("Response")
    if isinstance(response, dict):
        out.append(TextSubmitted.model_validate(response))
    return out
