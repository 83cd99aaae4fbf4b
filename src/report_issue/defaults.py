"""Built-in form used when `REPORT_ISSUE_FORM_PATH` is not set."""

from __future__ import annotations

from typing import Any, Dict

DEFAULT_FORM: Dict[str, Any] = {
    "start": {
        "options": [
            "Technical Issue with Incoming Audio/Video",
            "Technical Issue with Outgoing Audio/Video",
            "Can't connect to my meeting",
            "Request for a technician",
            "Issue with sharing content",
        ]
    },
    "form": {
        "category": {
            "type": {
                "Text": {"prefix": "", "options": "size=2;fontSize=normal;align=left"},
                "Button": {"name": ["Select Category", "Change Category"], "options": "size=2"},
            },
            "action": "Options",
            "placeholder": "eg. Please select category",
            "promptText": "Please enter the problem description",
            "inputType": "SingleLine",
            "showPlaceholder": True,
            "visible": True,
            "modifiable": True,
        },
        "name": {
            "requires": ["category"],
            "type": {
                "Text": {"prefix": "Name:", "options": "size=2;fontSize=normal;align=left"},
                "Button": {"name": ["Enter Name", "Change Name"], "options": "size=2"},
            },
            "action": "TextInput",
            "placeholder": "eg. John Smith (optional)",
            "promptText": "Please enter your name",
            "inputType": "SingleLine",
            "showPlaceholder": True,
            "visible": True,
            "modifiable": True,
        },
        "submit": {
            "requires": ["category"],
            "visible": True,
            "modifiable": True,
            "action": "Submit",
            "value": "active",
            "type": {"Button": {"name": ["Submit Issue"], "options": "size=2"}},
        },
    },
}
