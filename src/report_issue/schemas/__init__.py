from report_issue.schemas.events import PanelOpened, TextSubmitted, UIEvent, WidgetAction, events_from_feedback, parse_event
from report_issue.schemas.form import (
    ButtonVariant,
    FieldAction,
    FieldSpec,
    FormSchema,
    PanelAppearance,
    StartScreen,
    TextVariant,
    label_for,
)
from report_issue.schemas.ui import Alert, PanelDocument, Page, Row, TextInputPrompt, Widget, WidgetValue

__all__ = [
    "Alert",
    "ButtonVariant",
    "FieldAction",
    "FieldSpec",
    "FormSchema",
    "Page",
    "PanelAppearance",
    "PanelDocument",
    "PanelOpened",
    "Row",
    "StartScreen",
    "TextInputPrompt",
    "TextSubmitted",
    "TextVariant",
    "UIEvent",
    "Widget",
    "WidgetAction",
    "WidgetValue",
    "events_from_feedback",
    "label_for",
    "parse_event",
]
