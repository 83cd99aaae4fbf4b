from __future__ import annotations

from report_issue.adapters.xapi import XapiClient
from report_issue.schemas.ui import Alert, PanelDocument, TextInputPrompt, WidgetValue


class XapiDisplay:
    """Display surface backed by xAPI UserInterface commands."""

    def __init__(self, client: XapiClient) -> None:
        self.client = client

    async def save_panel(self, panel_id: str, document: PanelDocument) -> None:
        await self.client.command(
            ["UserInterface", "Extensions", "Panel", "Save"],
            {"PanelId": panel_id},
            body=document.to_xml(),
        )

    async def set_widget_value(self, command: WidgetValue) -> None:
        await self.client.command(
            ["UserInterface", "Extensions", "Widget", "SetValue"],
            {"Value": command.value, "WidgetId": command.widget_id},
        )

    async def show_text_input(self, prompt: TextInputPrompt) -> None:
        await self.client.command(
            ["UserInterface", "Message", "TextInput", "Display"],
            {
                "FeedbackId": prompt.feedback_id,
                "InputType": prompt.input_type,
                "Placeholder": prompt.placeholder,
                "Text": prompt.text,
                "Title": prompt.title,
                "InputText": prompt.input_text,
            },
        )

    async def show_alert(self, alert: Alert) -> None:
        await self.client.command(
            ["UserInterface", "Message", "Alert", "Display"],
            {"Duration": alert.duration, "Text": alert.text, "Title": alert.title},
        )

    async def close_panel(self) -> None:
        await self.client.command(["UserInterface", "Extensions", "Panel", "Close"])
